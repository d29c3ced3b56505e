"""Landing-page content router: plots and site settings.

Endpoints:
    GET    /api/plots                         List plots
    POST   /api/plots                         Create plot
    POST   /api/plots/{plot_id}/images        Append a carousel image
    DELETE /api/plots/{plot_id}/images        Remove a carousel image
    PUT    /api/plots/{plot_id}/info          Replace the info list
    PUT    /api/plots/{plot_id}/carousel      Replace the carousel
    DELETE /api/plots/{plot_id}               Delete plot
    GET    /api/settings                      All settings
    GET    /api/settings/cta-background       CTA background image
    POST   /api/settings/cta-background       Set CTA background image
    GET    /api/settings/footer               Footer content
    POST   /api/settings/footer               Save footer content
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.models.plot import Plot
from app.models.setting import Setting, SettingCategory, SettingDataType
from app.schemas.landing import (
    CtaBackgroundOut,
    CtaBackgroundRequest,
    FooterSettings,
    FooterSettingsIn,
    PlotCarouselUpdate,
    PlotCreate,
    PlotImageRequest,
    PlotInfoUpdate,
    PlotOut,
    SettingOut,
)
from app.schemas.validators import is_absolute_url
from app.services.site_settings import (
    CTA_BACKGROUND_KEY,
    CTA_DEFAULT_DESCRIPTION,
    get_setting,
    read_footer,
    save_footer,
    social_links_error,
    upsert_setting,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])


async def _get_plot(db: AsyncSession, plot_id: str) -> Plot:
    plot = await db.get(Plot, plot_id)
    if not plot:
        raise HTTPException(status_code=404, detail="Plot not found")
    return plot


def _images(plot: Plot) -> list:
    return list(plot.carousel_images) if isinstance(plot.carousel_images, list) else []


# ── Plots ────────────────────────────────────────────────────

@router.get("/plots", response_model=list[PlotOut])
async def list_plots(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Plot).order_by(Plot.created_at.desc()))
    return result.scalars().all()


@router.post("/plots", response_model=PlotOut, status_code=status.HTTP_201_CREATED)
async def create_plot(body: PlotCreate, db: AsyncSession = Depends(get_db)):
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Plot name is required")
    existing = await db.scalar(select(Plot).where(Plot.name == name))
    if existing:
        raise HTTPException(status_code=400, detail="Plot name already exists")

    plot = Plot(
        name=name,
        carousel_images=body.carousel_images or [],
        info_list=body.info_list or [],
    )
    db.add(plot)
    await db.flush()
    logger.info(f"Created plot {plot.name}")
    return plot


@router.post("/plots/{plot_id}/images", response_model=PlotOut)
async def add_plot_image(
    plot_id: str,
    body: PlotImageRequest,
    db: AsyncSession = Depends(get_db),
):
    image_url = (body.image_url or "").strip()
    if not image_url:
        raise HTTPException(status_code=400, detail="image_url is required")
    if not is_absolute_url(image_url):
        raise HTTPException(status_code=400, detail="image_url must be a valid URL")

    plot = await _get_plot(db, plot_id)
    images = _images(plot)
    if image_url in images:
        raise HTTPException(status_code=400, detail="Image is already in the carousel")

    plot.carousel_images = images + [image_url]
    await db.flush()
    logger.info(f"Added carousel image to plot {plot.name}")
    return plot


@router.delete("/plots/{plot_id}/images", response_model=PlotOut)
async def remove_plot_image(
    plot_id: str,
    body: PlotImageRequest,
    db: AsyncSession = Depends(get_db),
):
    image_url = (body.image_url or "").strip()
    if not image_url:
        raise HTTPException(status_code=400, detail="image_url is required")

    plot = await _get_plot(db, plot_id)
    images = _images(plot)
    if image_url not in images:
        raise HTTPException(status_code=404, detail="Image is not in the carousel")

    plot.carousel_images = [image for image in images if image != image_url]
    await db.flush()
    logger.info(f"Removed carousel image from plot {plot.name}")
    return plot


@router.put("/plots/{plot_id}/info", response_model=PlotOut)
async def update_plot_info(
    plot_id: str,
    body: PlotInfoUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not isinstance(body.info_list, list):
        raise HTTPException(status_code=400, detail="info_list must be an array")
    for index, item in enumerate(body.info_list, start=1):
        if not isinstance(item, dict) or not (
            item.get("icon") or item.get("label") or item.get("value")
        ):
            raise HTTPException(
                status_code=400,
                detail=f"Info item {index} needs an icon, label or value",
            )

    plot = await _get_plot(db, plot_id)
    plot.info_list = body.info_list
    await db.flush()
    return plot


@router.put("/plots/{plot_id}/carousel", response_model=PlotOut)
async def update_plot_carousel(
    plot_id: str,
    body: PlotCarouselUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not isinstance(body.carousel_images, list):
        raise HTTPException(status_code=400, detail="carousel_images must be an array")
    for index, url in enumerate(body.carousel_images, start=1):
        if not url or not isinstance(url, str):
            raise HTTPException(status_code=400, detail=f"Carousel image {index} is not a valid URL")

    plot = await _get_plot(db, plot_id)
    plot.carousel_images = body.carousel_images
    await db.flush()
    return plot


@router.delete("/plots/{plot_id}", response_model=PlotOut)
async def delete_plot(plot_id: str, db: AsyncSession = Depends(get_db)):
    plot = await _get_plot(db, plot_id)
    out = PlotOut.model_validate(plot)
    await db.delete(plot)
    await db.flush()
    logger.info(f"Deleted plot {out.name}")
    return out


# ── Settings ─────────────────────────────────────────────────

@router.get("/settings", response_model=list[SettingOut])
async def list_settings(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Setting).order_by(Setting.category.asc(), Setting.key.asc()))
    return result.scalars().all()


@router.get("/settings/cta-background", response_model=CtaBackgroundOut)
async def get_cta_background(db: AsyncSession = Depends(get_db)):
    setting = await get_setting(db, CTA_BACKGROUND_KEY)
    if setting is None:
        return CtaBackgroundOut(key=CTA_BACKGROUND_KEY, value="", description="")
    return CtaBackgroundOut(
        key=setting.key, value=setting.value or "", description=setting.description
    )


@router.post("/settings/cta-background", response_model=SettingOut)
async def set_cta_background(body: CtaBackgroundRequest, db: AsyncSession = Depends(get_db)):
    value = (body.value or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail="Background image URL is required")
    if not is_absolute_url(value):
        raise HTTPException(status_code=400, detail="Background image must be a valid URL")

    setting = await upsert_setting(
        db,
        CTA_BACKGROUND_KEY,
        value,
        description=(body.description or "").strip() or CTA_DEFAULT_DESCRIPTION,
        category=SettingCategory.ui,
        data_type=SettingDataType.url,
        is_public=True,
    )
    logger.info(f"CTA background set to {value}")
    return setting


@router.get("/settings/footer", response_model=FooterSettings)
async def get_footer_settings(db: AsyncSession = Depends(get_db)):
    return await read_footer(db)


@router.post("/settings/footer", response_model=FooterSettings)
async def set_footer_settings(body: FooterSettingsIn, db: AsyncSession = Depends(get_db)):
    error = social_links_error(body.social_links)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return await save_footer(db, body.model_dump())
