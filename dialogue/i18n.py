"""Bilingual (English / Marathi) message catalog.

Every user-facing string lives here, keyed by ``(key, language)``.  Texts
use named ``str.format`` placeholders; ``t()`` falls back to English when a
Marathi entry is missing.
"""

from __future__ import annotations

import logging

from dialogue.models.session import ConversationState, Language

log = logging.getLogger("dialogue.i18n")

EN = Language.ENGLISH
MR = Language.MARATHI


_CATALOG: dict[str, dict[Language, str]] = {
    # ── Language selection / welcome ──────────────────────────
    "language_menu": {
        EN: (
            "Please choose your language / कृपया आपली भाषा निवडा:\n\n"
            "1. English\n"
            "2. मराठी (Marathi)\n\n"
            "Reply with 1 or 2."
        ),
    },
    "welcome": {
        EN: (
            "Welcome to {brand}! 🏢\n\n"
            "I'm here to help you find the right commercial property and book "
            "a site visit with {agent}."
        ),
        MR: (
            "{brand} मध्ये आपले स्वागत आहे! 🏢\n\n"
            "योग्य व्यावसायिक मालमत्ता शोधण्यासाठी आणि {agent} यांच्यासोबत "
            "साइट भेट ठरवण्यासाठी मी आपली मदत करेन."
        ),
    },
    "language_set": {
        EN: "Language set to English. Reply OK to continue.",
        MR: "भाषा मराठी निवडली आहे. पुढे जाण्यासाठी OK पाठवा.",
    },
    "invalid_choice": {
        EN: "Sorry, I didn't understand that. Please choose one of the options below.",
        MR: "क्षमस्व, मला ते समजले नाही. कृपया खालीलपैकी एक पर्याय निवडा.",
    },

    # ── Interest selection ────────────────────────────────────
    "interest_menu": {
        EN: (
            "What type of property are you interested in?\n\n"
            "1. Office\n"
            "2. Shop\n"
            "3. Warehouse\n"
            "4. Show all properties\n\n"
            "Reply with a number (1-4)."
        ),
        MR: (
            "आपल्याला कोणत्या प्रकारच्या मालमत्तेमध्ये रस आहे?\n\n"
            "1. ऑफिस\n"
            "2. दुकान\n"
            "3. गोदाम\n"
            "4. सर्व मालमत्ता दाखवा\n\n"
            "क्रमांक (1-4) पाठवा."
        ),
    },
    "catalog_unavailable": {
        EN: "Sorry, I couldn't search our listings right now. Please try again in a moment.",
        MR: "क्षमस्व, सध्या मालमत्ता शोधता आल्या नाहीत. कृपया थोड्या वेळाने पुन्हा प्रयत्न करा.",
    },

    # ── Property match ────────────────────────────────────────
    "property_list_header": {
        EN: "🏢 *Found {count} properties for you:*",
        MR: "🏢 *आपल्यासाठी {count} मालमत्ता सापडल्या:*",
    },
    "property_list_footer": {
        EN: "Reply with the property number to see details.",
        MR: "तपशील पाहण्यासाठी मालमत्तेचा क्रमांक पाठवा.",
    },
    "no_matches": {
        EN: (
            "I couldn't find any matching properties right now. "
            "Reply 'new search' to try another category, or 'help' for options."
        ),
        MR: (
            "सध्या जुळणारी कोणतीही मालमत्ता सापडली नाही. "
            "दुसरा प्रकार निवडण्यासाठी 'नवीन शोध' किंवा पर्यायांसाठी 'मदत' पाठवा."
        ),
    },
    "invalid_property_index": {
        EN: "Please reply with a property number between 1 and {count}.",
        MR: "कृपया 1 ते {count} मधील मालमत्तेचा क्रमांक पाठवा.",
    },

    # ── Property card labels ──────────────────────────────────
    "label_location": {EN: "Location", MR: "स्थान"},
    "label_price": {EN: "Price", MR: "किंमत"},
    "label_type": {EN: "Type", MR: "प्रकार"},
    "label_area": {EN: "Carpet Area", MR: "कार्पेट क्षेत्र"},
    "label_amenities": {EN: "Amenities", MR: "सुविधा"},
    "label_description": {EN: "Description", MR: "वर्णन"},
    "offer_sale": {EN: "Available for Sale", MR: "विक्रीसाठी उपलब्ध"},
    "offer_lease": {EN: "Available for Lease", MR: "भाड्यासाठी उपलब्ध"},
    "offer_sale_or_lease": {
        EN: "Available for Sale and Lease",
        MR: "विक्री आणि भाड्यासाठी उपलब्ध",
    },
    "category_office": {EN: "Office", MR: "ऑफिस"},
    "category_shop": {EN: "Shop", MR: "दुकान"},
    "category_warehouse": {EN: "Warehouse", MR: "गोदाम"},

    # ── Schedule visit ────────────────────────────────────────
    "schedule_menu": {
        EN: (
            "Would you like to schedule a site visit for this property?\n\n"
            "1. Yes, schedule a visit\n"
            "2. No, go back to the property list"
        ),
        MR: (
            "आपल्याला या मालमत्तेसाठी साइट भेट ठरवायची आहे का?\n\n"
            "1. होय, भेट ठरवा\n"
            "2. नाही, मालमत्तेच्या यादीकडे परत जा"
        ),
    },

    # ── Slot filling ──────────────────────────────────────────
    "ask_name": {
        EN: "Great choice! To schedule your visit to {property}, please tell me your full name.",
        MR: "उत्तम निवड! {property} च्या भेटीसाठी कृपया आपले पूर्ण नाव सांगा.",
    },
    "invalid_name": {
        EN: "Please enter a valid name (at least {min_length} characters, including letters).",
        MR: "कृपया योग्य नाव लिहा (किमान {min_length} अक्षरे).",
    },
    "ask_phone": {
        EN: "Thanks, {name}! 😊 Please share your 10-digit mobile number so our agent can confirm the visit.",
        MR: "धन्यवाद, {name}! 😊 भेटीची खात्री करण्यासाठी कृपया आपला 10 अंकी मोबाईल नंबर पाठवा.",
    },
    "invalid_phone": {
        EN: "That doesn't look like a valid 10-digit mobile number. Please try again (e.g. 9876543210).",
        MR: "हा योग्य 10 अंकी मोबाईल नंबर वाटत नाही. कृपया पुन्हा प्रयत्न करा (उदा. 9876543210).",
    },
    "ask_time": {
        EN: (
            "Perfect! 📱 When would you like to visit? "
            "Please type your preferred date and time (e.g. 25/12/2026 at 11 AM)."
        ),
        MR: (
            "छान! 📱 आपल्याला भेट कधी द्यायची आहे? "
            "कृपया आपली सोयीची तारीख आणि वेळ लिहा (उदा. 25/12/2026 सकाळी 11 वाजता)."
        ),
    },
    "invalid_time": {
        EN: "Please tell me your preferred date and time for the visit.",
        MR: "कृपया भेटीसाठी आपली सोयीची तारीख आणि वेळ सांगा.",
    },
    "ask_requirements": {
        EN: (
            "Do you have any special requirements for the visit?\n\n"
            "1. No special requirements\n"
            "2. Information about financing options\n"
            "3. Nearby amenities\n"
            "4. Renovation possibilities\n"
            "5. Other (type your own)"
        ),
        MR: (
            "भेटीसाठी आपल्या काही विशेष आवश्यकता आहेत का?\n\n"
            "1. कोणतीही विशेष आवश्यकता नाही\n"
            "2. कर्ज / वित्तपुरवठा पर्यायांची माहिती\n"
            "3. जवळपासच्या सुविधा\n"
            "4. नूतनीकरणाच्या शक्यता\n"
            "5. इतर (स्वतः लिहा)"
        ),
    },
    "ask_requirement_details": {
        EN: "Please describe your requirements.",
        MR: "कृपया आपल्या आवश्यकता लिहा.",
    },
    "invalid_requirement_details": {
        EN: "Please type your requirements in a few words.",
        MR: "कृपया आपल्या आवश्यकता थोडक्यात लिहा.",
    },

    # ── Finalization ──────────────────────────────────────────
    "booking_confirmed": {
        EN: (
            "✅ *Your site visit is booked!*\n\n"
            "Reference: {appointment_id}\n"
            "Property: {property}\n"
            "Name: {name}\n"
            "Phone: {phone}\n"
            "Preferred time: {time}\n"
            "Requirements: {requirements}\n\n"
            "{agent} will contact you shortly to confirm the visit."
        ),
        MR: (
            "✅ *आपली साइट भेट नोंदवली गेली आहे!*\n\n"
            "संदर्भ क्रमांक: {appointment_id}\n"
            "मालमत्ता: {property}\n"
            "नाव: {name}\n"
            "फोन: {phone}\n"
            "सोयीची वेळ: {time}\n"
            "आवश्यकता: {requirements}\n\n"
            "{agent} भेटीची खात्री करण्यासाठी लवकरच आपल्याशी संपर्क साधतील."
        ),
    },
    "booking_failed": {
        EN: "Sorry, we couldn't book your visit right now. Reply with anything to try again.",
        MR: "क्षमस्व, सध्या आपली भेट नोंदवता आली नाही. पुन्हा प्रयत्न करण्यासाठी कोणताही संदेश पाठवा.",
    },
    "booking_incomplete": {
        EN: "A few details are still missing before I can book your visit.",
        MR: "भेट नोंदवण्यापूर्वी काही माहिती अजून बाकी आहे.",
    },
    "booking_exists": {
        EN: "Your visit is already booked (reference {appointment_id}).",
        MR: "आपली भेट आधीच नोंदवली आहे (संदर्भ क्रमांक {appointment_id}).",
    },

    # ── Completed ─────────────────────────────────────────────
    "completed_menu": {
        EN: (
            "What would you like to do next?\n\n"
            "1. Start a new property search\n"
            "2. View appointment details\n"
            "3. Get property documents\n"
            "4. View similar properties\n"
            "5. End conversation"
        ),
        MR: (
            "पुढे आपल्याला काय करायचे आहे?\n\n"
            "1. नवीन मालमत्ता शोध सुरू करा\n"
            "2. भेटीचा तपशील पहा\n"
            "3. मालमत्तेची कागदपत्रे मिळवा\n"
            "4. समान मालमत्ता पहा\n"
            "5. संभाषण समाप्त करा"
        ),
    },
    "appointment_details": {
        EN: (
            "📅 *Appointment details*\n\n"
            "Reference: {appointment_id}\n"
            "Property: {property}\n"
            "Location: {location}\n"
            "Name: {name}\n"
            "Phone: {phone}\n"
            "Preferred time: {time}\n"
            "Price: {price}\n"
            "Status: {status}\n\n"
            "👤 Your agent: {agent_contact}"
        ),
        MR: (
            "📅 *भेटीचा तपशील*\n\n"
            "संदर्भ क्रमांक: {appointment_id}\n"
            "मालमत्ता: {property}\n"
            "स्थान: {location}\n"
            "नाव: {name}\n"
            "फोन: {phone}\n"
            "सोयीची वेळ: {time}\n"
            "किंमत: {price}\n"
            "स्थिती: {status}\n\n"
            "👤 आपले प्रतिनिधी: {agent_contact}"
        ),
    },
    "details_menu": {
        EN: "1. Start a new search\n2. Get property documents\n3. End conversation",
        MR: "1. नवीन शोध सुरू करा\n2. मालमत्तेची कागदपत्रे मिळवा\n3. संभाषण समाप्त करा",
    },
    "documents_menu": {
        EN: (
            "Which document would you like?\n\n"
            "1. Brochure\n"
            "2. Floor plan\n"
            "3. Price list\n"
            "4. Back"
        ),
        MR: (
            "आपल्याला कोणते कागदपत्र हवे आहे?\n\n"
            "1. माहितीपत्रक\n"
            "2. फ्लोअर प्लॅन\n"
            "3. किंमत यादी\n"
            "4. मागे जा"
        ),
    },
    "similar_header": {
        EN: "🏠 *Similar properties to {property}:*",
        MR: "🏠 *{property} सारख्या इतर मालमत्ता:*",
    },
    "no_similar": {
        EN: "I couldn't find any similar properties right now.",
        MR: "सध्या अशा प्रकारच्या इतर मालमत्ता सापडल्या नाहीत.",
    },
    "document_brochure": {EN: "Brochure", MR: "माहितीपत्रक"},
    "document_floor_plan": {EN: "Floor plan", MR: "फ्लोअर प्लॅन"},
    "document_price_list": {EN: "Price list", MR: "किंमत यादी"},
    "document_caption": {
        EN: "{document} for {property}",
        MR: "{property} साठी {document}",
    },
    "document_requested": {
        EN: "Our agent will share the {document} for {property} with you shortly.",
        MR: "आमचे प्रतिनिधी {property} साठी {document} लवकरच आपल्याला पाठवतील.",
    },
    "goodbye": {
        EN: "Thank you for contacting {brand}! 🙏 Type 'Hi' whenever you'd like to start again.",
        MR: "{brand} शी संपर्क साधल्याबद्दल धन्यवाद! 🙏 पुन्हा सुरू करण्यासाठी कधीही 'Hi' टाइप करा.",
    },

    # ── Inactivity ────────────────────────────────────────────
    "still_there": {
        EN: "Are you still there? Reply with anything to continue, or 'end' to close the conversation.",
        MR: "आपण अजून आहात का? पुढे जाण्यासाठी कोणताही संदेश पाठवा, किंवा संभाषण बंद करण्यासाठी 'समाप्त' पाठवा.",
    },
    "inactivity_notice": {
        EN: (
            "You have been inactive for a while. Your conversation session will now "
            "be closed. Type 'Hi' to start a new conversation when you're ready."
        ),
        MR: (
            "आपण काही वेळ निष्क्रिय आहात. आपली संभाषण सत्र आता बंद केली जाईल. "
            "जेव्हा आपण तयार असाल तेव्हा नवीन संभाषण सुरू करण्यासाठी 'Hi' टाइप करा."
        ),
    },

    # ── Errors / misc ─────────────────────────────────────────
    "media_unsupported": {
        EN: "I can only read text messages at the moment.",
        MR: "सध्या मी फक्त मजकूर संदेश वाचू शकतो.",
    },
    "generic_error": {
        EN: "Sorry, I encountered an error. Please try again later.",
        MR: "क्षमस्व, काहीतरी चूक झाली. कृपया थोड्या वेळाने पुन्हा प्रयत्न करा.",
    },
    "state_error": {
        EN: "Sorry, something went wrong with our conversation. Let's start over.",
        MR: "क्षमस्व, आपल्या संभाषणात काहीतरी चूक झाली. चला पुन्हा सुरू करूया.",
    },

    # ── Help, one entry per state ─────────────────────────────
    "help_language_selection": {
        EN: "Reply 1 for English or 2 for Marathi. You can type 'hi' at any time to start over.",
        MR: "इंग्रजीसाठी 1 किंवा मराठीसाठी 2 पाठवा. पुन्हा सुरू करण्यासाठी कधीही 'hi' पाठवा.",
    },
    "help_welcome": {
        EN: "Reply with anything to see the property types we offer, or 'change language' to switch language.",
        MR: "मालमत्तेचे प्रकार पाहण्यासाठी कोणताही संदेश पाठवा, किंवा भाषा बदलण्यासाठी 'भाषा बदला' पाठवा.",
    },
    "help_interest_selection": {
        EN: "Reply 1 for offices, 2 for shops, 3 for warehouses or 4 to see everything.",
        MR: "ऑफिससाठी 1, दुकानासाठी 2, गोदामासाठी 3 किंवा सर्व पाहण्यासाठी 4 पाठवा.",
    },
    "help_property_match": {
        EN: "Reply with the number of a property to see its details, or 'new search' to start over.",
        MR: "तपशील पाहण्यासाठी मालमत्तेचा क्रमांक पाठवा, किंवा पुन्हा सुरू करण्यासाठी 'नवीन शोध' पाठवा.",
    },
    "help_schedule_visit": {
        EN: "Reply 1 to book a site visit or 2 to go back to the property list.",
        MR: "साइट भेट ठरवण्यासाठी 1 किंवा यादीकडे परत जाण्यासाठी 2 पाठवा.",
    },
    "help_collect_info": {
        EN: "I need your name, mobile number, preferred visit time and any special requirements. Answer the current question, or type 'new search' to start over.",
        MR: "मला आपले नाव, मोबाईल नंबर, भेटीची वेळ आणि विशेष आवश्यकता हव्या आहेत. सध्याच्या प्रश्नाचे उत्तर द्या, किंवा पुन्हा सुरू करण्यासाठी 'नवीन शोध' पाठवा.",
    },
    "help_completed": {
        EN: "Your visit is booked. Reply 1 for a new search, 2 for appointment details, 3 for documents, 4 for similar properties or 5 to end.",
        MR: "आपली भेट नोंदवली आहे. नवीन शोधासाठी 1, भेटीच्या तपशीलासाठी 2, कागदपत्रांसाठी 3, समान मालमत्तांसाठी 4 किंवा समाप्त करण्यासाठी 5 पाठवा.",
    },

    "help_details": {
        EN: "You are viewing your appointment details. Reply 1 for a new search, 2 for documents or 3 to end.",
        MR: "आपण भेटीचा तपशील पाहत आहात. नवीन शोधासाठी 1, कागदपत्रांसाठी 2 किंवा समाप्त करण्यासाठी 3 पाठवा.",
    },
    "help_documents": {
        EN: "Reply 1 for the brochure, 2 for the floor plan, 3 for the price list or 4 to go back.",
        MR: "माहितीपत्रकासाठी 1, फ्लोअर प्लॅनसाठी 2, किंमत यादीसाठी 3 किंवा मागे जाण्यासाठी 4 पाठवा.",
    },

    # ── Agent-facing (sent to the sales agent) ────────────────
    "agent_new_booking": {
        EN: (
            "🔔 New site visit booked\n\n"
            "Reference: {appointment_id}\n"
            "Property: {property}\n"
            "Client: {name} ({phone})\n"
            "Preferred time: {time}\n"
            "Requirements: {requirements}\n"
            "Language: {language}"
        ),
    },
    "agent_document_request": {
        EN: "📄 Document request: {document} for {property} from {name} ({phone}).",
    },
}

MESSAGES: dict[tuple[str, Language], str] = {
    (key, language): text
    for key, texts in _CATALOG.items()
    for language, text in texts.items()
}


def t(key: str, language: Language = EN, **params: object) -> str:
    """Look up ``key`` in ``language`` and fill its placeholders.

    Falls back to the English text when no translation exists.  An unknown
    key raises KeyError.
    """
    text = MESSAGES.get((key, language))
    if text is None:
        text = MESSAGES[(key, EN)]
    return text.format(**params) if params else text


def help_key(state: ConversationState) -> str:
    return f"help_{state.value}"


def join(*parts: str | None) -> str:
    """Join non-empty message parts with a blank line."""
    return "\n\n".join(p for p in parts if p)
