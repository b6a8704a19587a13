from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SiteProfile(BaseModel):
    """Selectors for one retailer. Tried before the generic meta/JSON-LD tiers."""

    model_config = ConfigDict(frozen=True)

    name: str
    domain_matchers: Tuple[str, ...]
    title_selectors: Tuple[str, ...] = ()
    image_selectors: Tuple[str, ...] = ()
    price_selectors: Tuple[str, ...] = ()


# Registration order is the match priority.
SITE_PROFILES: Tuple[SiteProfile, ...] = (
    SiteProfile(
        name="zara",
        domain_matchers=("zara.com",),
        title_selectors=("h1", "[data-qa='product-name']"),
        image_selectors=("img[data-zoomimage]", "img[srcset]", "img[data-src]"),
        price_selectors=("[itemprop='price']", ".price__amount", ".money-amount__main"),
    ),
    SiteProfile(
        name="uniqlo",
        domain_matchers=("uniqlo.com",),
        title_selectors=("h1", ".product-name"),
        image_selectors=(".swiper-zoom-container img", "img[data-src]"),
        price_selectors=("[itemprop='price']", ".price", ".product-price"),
    ),
    # gap.com, oldnavy.gap.com, bananarepublic.gap.com, athleta.gap.com
    SiteProfile(
        name="gap",
        domain_matchers=("gap.com", "oldnavy.com", "bananarepublic.com", "athleta.com"),
        title_selectors=("[data-automation-id='pdp-name']", ".pdp-title", ".product-title", "h1"),
        image_selectors=("img#main-product-image", ".pdp-primary-image img"),
        price_selectors=("[data-automation-id='pdp-price']", ".product-price", "[itemprop='price']"),
    ),
    SiteProfile(
        name="amazon",
        domain_matchers=("amazon.", "amzn."),
        title_selectors=("#productTitle", "#title"),
        image_selectors=("#landingImage", "#imgBlkFront", "#main-image"),
        price_selectors=(".a-price .a-offscreen", "#priceblock_ourprice", "#priceblock_dealprice"),
    ),
    SiteProfile(
        name="etsy",
        domain_matchers=("etsy.com",),
        title_selectors=("h1[data-buy-box-listing-title]", "h1"),
        image_selectors=("img[data-index='0']", ".listing-page-image-carousel-component img"),
        price_selectors=("[data-buy-box-region='price'] .currency-value", ".wt-text-title-larger"),
    ),
)


def match_profile(url: str, profiles: Tuple[SiteProfile, ...] = SITE_PROFILES) -> Optional[SiteProfile]:
    lowered = (url or "").lower()
    for profile in profiles:
        if any(m.lower() in lowered for m in profile.domain_matchers):
            return profile
    return None
