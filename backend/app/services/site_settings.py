"""Key/value site settings: CTA background and footer content.

Footer content is spread over four public settings rows.  ``social_links``
is stored as a JSON string and decoded on read; an undecodable value reads
as an empty list.
"""

import json
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.setting import Setting, SettingCategory, SettingDataType

logger = logging.getLogger(__name__)

CTA_BACKGROUND_KEY = "cta_background_image"
CTA_DEFAULT_DESCRIPTION = "云养茶园CTA区域背景图"

# footer field → (setting key, data type, description)
FOOTER_SETTINGS = {
    "logo_url": ("footer_logo_url", SettingDataType.url, "页脚 Logo 图片 URL"),
    "garden_name": ("footer_garden_name", SettingDataType.text, "页脚茶园名称"),
    "copyright_text": ("footer_copyright_text", SettingDataType.text, "页脚版权信息文本"),
    "social_links": ("social_links", SettingDataType.json, "页脚社交媒体链接列表"),
}


async def get_setting(db: AsyncSession, key: str) -> Setting | None:
    return await db.scalar(select(Setting).where(Setting.key == key))


async def upsert_setting(
    db: AsyncSession,
    key: str,
    value: str,
    *,
    description: str | None = None,
    category: SettingCategory = SettingCategory.general,
    data_type: SettingDataType = SettingDataType.string,
    is_public: bool = False,
) -> Setting:
    setting = await get_setting(db, key)
    if setting is None:
        setting = Setting(key=key)
        db.add(setting)
    setting.value = value
    setting.description = description
    setting.category = category
    setting.data_type = data_type
    setting.is_public = is_public
    await db.flush()
    return setting


def _decode_links(raw: str | None) -> list:
    if not raw:
        return []
    try:
        links = json.loads(raw)
    except ValueError:
        logger.warning("social_links setting is not valid JSON; returning []")
        return []
    return links if isinstance(links, list) else []


async def read_footer(db: AsyncSession) -> dict:
    """``{logo_url, garden_name, copyright_text, social_links}`` with blank defaults."""
    keys = {key: field for field, (key, _, _) in FOOTER_SETTINGS.items()}
    result = await db.execute(select(Setting).where(Setting.key.in_(list(keys))))

    footer = {"logo_url": "", "garden_name": "", "copyright_text": "", "social_links": []}
    for setting in result.scalars().all():
        field = keys[setting.key]
        if field == "social_links":
            footer[field] = _decode_links(setting.value)
        else:
            footer[field] = setting.value or ""
    return footer


def social_links_error(links) -> str | None:
    """Validation message for a social-links payload, or None when valid."""
    if links is None:
        return None
    if not isinstance(links, list):
        return "social_links must be an array"
    for index, link in enumerate(links, start=1):
        if not isinstance(link, dict) or not link.get("platform") or not link.get("url"):
            return f"Social link {index} is missing platform or url"
    return None


async def save_footer(db: AsyncSession, values: dict) -> dict:
    for field, (key, data_type, description) in FOOTER_SETTINGS.items():
        if field == "social_links":
            value = json.dumps(values.get(field) or [], ensure_ascii=False)
        else:
            value = values.get(field) or ""
        await upsert_setting(
            db,
            key,
            value,
            description=description,
            category=SettingCategory.footer,
            data_type=data_type,
            is_public=True,
        )
    logger.info("Saved footer settings")
    return await read_footer(db)
