"""Text composition for property lists, detail cards and dates."""

from __future__ import annotations

from datetime import date

from dialogue.i18n import t
from dialogue.models.property import PropertySummary
from dialogue.models.session import Language

WEEKDAYS: dict[Language, tuple[str, ...]] = {
    Language.ENGLISH: (
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
    ),
    Language.MARATHI: (
        "सोमवार", "मंगळवार", "बुधवार", "गुरुवार", "शुक्रवार", "शनिवार", "रविवार",
    ),
}

_OFFER_KEYS = {
    "sale": "offer_sale",
    "lease": "offer_lease",
    "sale_or_lease": "offer_sale_or_lease",
}


def format_inr(amount: int) -> str:
    """Format rupees with Indian digit grouping: 15000000 -> ₹1,50,00,000."""
    sign = "-" if amount < 0 else ""
    digits = str(abs(int(amount)))
    if len(digits) <= 3:
        return f"{sign}₹{digits}"
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return f"{sign}₹{','.join(groups)},{tail}"


def weekday_name(day: date, language: Language) -> str:
    return WEEKDAYS[language][day.weekday()]


def category_label(category: str, language: Language) -> str:
    if not category:
        return ""
    try:
        return t(f"category_{category}", language)
    except KeyError:
        return category.title()


def format_property_list(
    properties: list[PropertySummary], language: Language, footer: bool = True,
) -> str:
    lines = [t("property_list_header", language, count=len(properties))]
    for index, prop in enumerate(properties, start=1):
        entry = f"{index}. {prop.title}\n   📍 {prop.location}\n   💰 {format_inr(prop.price)}"
        if prop.area:
            entry += f"\n   📏 {prop.area}"
        if prop.key_amenities:
            amenities = ", ".join(prop.key_amenities[:3])
            if len(prop.key_amenities) > 3:
                amenities += "..."
            entry += f"\n   ✨ {amenities}"
        lines.append(entry)
    if footer:
        lines.append(t("property_list_footer", language))
    return "\n\n".join(lines)


def format_property_card(prop: PropertySummary, language: Language) -> str:
    lines = [
        f"*{prop.title}*",
        "",
        f"📍 {t('label_location', language)}: {prop.location}",
        f"💰 {t('label_price', language)}: {format_inr(prop.price)}",
    ]
    if prop.category:
        lines.append(f"🏢 {t('label_type', language)}: {category_label(prop.category, language)}")
    offer_key = _OFFER_KEYS.get(prop.offer)
    if offer_key:
        lines.append(f"🔖 {t(offer_key, language)}")
    if prop.area:
        lines.append(f"📏 {t('label_area', language)}: {prop.area}")
    if prop.key_amenities:
        lines.append(f"✨ {t('label_amenities', language)}: {', '.join(prop.key_amenities)}")
    if prop.description:
        lines.extend(["", f"📝 {t('label_description', language)}:", prop.description])
    return "\n".join(lines)
