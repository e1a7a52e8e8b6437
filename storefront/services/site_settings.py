"""
Site settings: stored key/value rows merged over a static default table.

Settings are read per request into a `SiteConfig`; nothing is cached at
process level, so an update through the admin API is visible on the next read.
"""
import logging
import re
from typing import Any, Dict, List, Mapping, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.db.models import SiteSettingOrm

logger = logging.getLogger(__name__)

DEFAULT_SITE_NAME = "Your Brand"
DEFAULT_DESCRIPTION = "Discover premium products with exceptional quality and design"
DEFAULT_KEYWORDS = "premium products, quality, design, lifestyle"

DEFAULT_SITE_SETTINGS: Dict[str, str] = {
    "siteName": DEFAULT_SITE_NAME,
    "logoUrl": "",
    "siteDescription": DEFAULT_DESCRIPTION,
    "siteKeywords": DEFAULT_KEYWORDS,
    "contactEmail": "contact@yourbrand.com",
    "contactPhone": "+1 (555) 123-4567",
    "contactAddress": "123 Main Street, City, State 12345",
    "socialFacebook": "https://facebook.com/yourbrand",
    "socialTwitter": "https://twitter.com/yourbrand",
    "socialInstagram": "https://instagram.com/yourbrand",
    "socialYoutube": "https://youtube.com/yourbrand",
    "footerText": "© 2025 Your Brand. All rights reserved.",
    "aboutText": "We're passionate about bringing you the finest products that combine quality, innovation, and style.",
    "ourStory": (
        "Founded with a vision to make premium products accessible to everyone, Your Brand has been "
        "dedicated to curating exceptional items that enhance your daily life."
    ),
    "ourMission": (
        "To provide our customers with carefully selected, high-quality products that offer both "
        "functionality and style."
    ),
    "whyChooseUs": (
        "Rigorous quality control and product testing\n"
        "Competitive pricing with transparent policies\n"
        "Excellent customer service and support\n"
        "Fast and reliable shipping\n"
        "Satisfaction guarantee on all products"
    ),
    "privacyPolicy": (
        "We value your privacy. This policy explains what data we collect, how we use it, and your rights."
    ),
    "termsOfService": "By using our site, you agree to our terms.",
    "analyticsHeadHtml": "",
    "analyticsBodyHtml": "",
    "analyticsGoogleHtml": "",
    # SEO
    "seoTitle": "",
    "seoKeywords": DEFAULT_KEYWORDS,
    "seoDescription": DEFAULT_DESCRIPTION,
    "seoSummary": "",
    # Site verification
    "googleSiteVerification": "",
    "baiduSiteVerification": "",
    # Message forwarding
    "messageForwardEnabled": "false",
    "messageForwardEmail": "",
}

# Keys never exposed through the public site endpoint.
PRIVATE_SETTING_KEYS = frozenset({"messageForwardEnabled", "messageForwardEmail"})

SCRIPT_TAG_RE = re.compile(r"<script([^>]*)>([\s\S]*?)</script>", re.IGNORECASE)
SCRIPT_ATTR_RE = re.compile(r"""(\w+)(\s*=\s*"([^"]*)"|\s*=\s*'([^']*)'|\s*=\s*([^\s"'>]+))?""")
DOCUMENT_TAG_RE = re.compile(r"</?(html|head|body)[^>]*>", re.IGNORECASE)
VIEWPORT_META_RE = re.compile(r"""<meta[^>]*name=['"]viewport['"][^>]*>""", re.IGNORECASE)


class SiteConfig:
    """Effective site settings for one request."""

    def __init__(self, values: Mapping[str, str]):
        self._values: Dict[str, str] = dict(values)

    def get(self, key: str, default: str = "") -> str:
        value = self._values.get(key)
        return default if value is None else value

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def public_dict(self) -> Dict[str, str]:
        return {k: v for k, v in self._values.items() if k not in PRIVATE_SETTING_KEYS}

    @property
    def forwarding_enabled(self) -> bool:
        return self.get("messageForwardEnabled").strip().lower() == "true"

    @property
    def forward_email(self) -> str:
        return self.get("messageForwardEmail").strip()

    def metadata(self) -> Dict[str, Any]:
        """Page title, description, keywords and verification meta tags."""
        title = self.get("seoTitle")
        site_name = self.get("siteName") or DEFAULT_SITE_NAME
        if not title or title == DEFAULT_SITE_NAME:
            title = site_name

        description = self.get("seoDescription") or self.get("siteDescription") or DEFAULT_DESCRIPTION
        keywords = self.get("seoKeywords") or self.get("siteKeywords") or DEFAULT_KEYWORDS

        other: Dict[str, str] = {}
        google = self.get("googleSiteVerification")
        baidu = self.get("baiduSiteVerification")
        if google:
            other["google-site-verification"] = google
        if baidu:
            other["baidu-site-verification"] = baidu
        return {"title": title, "description": description, "keywords": keywords, "other": other}

    def analytics(self) -> Dict[str, Any]:
        head_scripts, _ = extract_scripts(self.get("analyticsHeadHtml"))
        google_scripts, _ = extract_scripts(self.get("analyticsGoogleHtml"))
        body_scripts, body_remainder = extract_scripts(self.get("analyticsBodyHtml"))
        return {
            "head_scripts": head_scripts + google_scripts,
            "body_scripts": body_scripts,
            "body_html": sanitize_body_html(body_remainder),
        }


def extract_scripts(html: str) -> Tuple[List[Dict[str, Any]], str]:
    """
    Pull <script> tags out of an analytics snippet.
    Returns the scripts as {src, content, attrs} and the HTML left over.
    """
    if not html or not isinstance(html, str):
        return [], ""
    scripts: List[Dict[str, Any]] = []

    def _collect(match: "re.Match[str]") -> str:
        attr_str = match.group(1) or ""
        content = match.group(2) or ""
        attrs: Dict[str, str] = {}
        for attr in SCRIPT_ATTR_RE.finditer(attr_str):
            attrs[attr.group(1)] = attr.group(3) or attr.group(4) or attr.group(5) or ""
        scripts.append({"src": attrs.get("src"), "content": content, "attrs": attrs})
        return ""

    remainder = SCRIPT_TAG_RE.sub(_collect, html)
    return scripts, remainder


def sanitize_body_html(html: str) -> str:
    html = DOCUMENT_TAG_RE.sub("", html or "")
    return VIEWPORT_META_RE.sub("", html)


def load_site_config(db: Session) -> SiteConfig:
    values = dict(DEFAULT_SITE_SETTINGS)
    try:
        rows = db.query(SiteSettingOrm).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch settings from DB, using defaults: {e}", exc_info=True)
        db.rollback()
        return SiteConfig(values)
    for row in rows:
        values[row.key] = row.value
    return SiteConfig(values)


def save_site_settings(db: Session, updates: Mapping[str, Any]) -> SiteConfig:
    """Upsert the given keys; values are stored as text."""
    existing = {
        row.key: row
        for row in db.query(SiteSettingOrm).filter(SiteSettingOrm.key.in_(list(updates.keys()))).all()
    }
    for key, value in updates.items():
        text = "" if value is None else (str(value).lower() if isinstance(value, bool) else str(value))
        if key in existing:
            existing[key].value = text
        else:
            db.add(SiteSettingOrm(key=key, value=text))
    db.commit()
    logger.info(f"Updated {len(updates)} site setting(s): {sorted(updates.keys())}")
    return load_site_config(db)
