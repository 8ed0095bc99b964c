"""Bilingual (English / Marathi) WhatsApp assistant for commercial property
discovery and site-visit booking."""
