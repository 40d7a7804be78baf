"""
PS5 Availability — Retailer Registry

Static, read-only descriptors per retailer. The check engine is shared;
adding a retailer is a data change here. Selectors are full CSS paths
copied from the rendered product pages and break when a site changes its
layout, which the structural validator is there to catch.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ps5_availability.config import Edition
from ps5_availability.errors import RegistryLookupFailure


class AvailabilitySelectors(BaseModel):
    """Selectors used by the evaluation phase."""

    model_config = ConfigDict(frozen=True)

    out_of_stock_notice: str
    purchase_action: str


class RetailerDescriptor(BaseModel):
    """Immutable per-retailer configuration."""

    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str
    locale: str
    location: str
    edition: Edition
    target_url: str
    consent_prompt_selector: str | None = None
    structural_selector: str
    availability_selectors: AvailabilitySelectors
    expected_structural_text: str
    expected_out_of_stock_text: str
    expected_purchase_action_text: str


# Bol and Coolblue render the same cookie modal markup.
_COOLBLUE_STYLE_CONSENT = (
    "body > div.cookie > div > div.modal-box__container.js-modal-box__container"
    " > div.modal-box__content.position--relative.js-modal-box__content > div > div"
    " > div.grid-unit-xs--col-12.grid-unit-m--col-7 > form > div"
    " > div.grid-unit-xs--col-12.grid-unit-m--col-12.space--bottom-4 > button"
)

_BOL_TITLE = (
    "#mainContent > div > div.constrain.constrain--main.h-bottom--m"
    " > div.pdp-header.slot.slot--pdp-header.js_slot-title > h1"
)

_COOLBLUE_ORDER_BLOCK = (
    "#main-content > div.grid-section-xs--gap-4.grid-section-m--gap-5 > div"
    " > div.grid-unit-xs--col-12.grid-unit-m--col-6.grid-unit-xl--col-5.js-sticky-bar-trigger > div"
)


BOL_NL = RetailerDescriptor(
    key="bolnl",
    display_name="Bol",
    locale="nl-NL",
    location="Netherlands",
    edition=Edition.DISC,
    target_url="https://www.bol.com/nl/p/sony-playstation-5-console/9300000004162282/",
    consent_prompt_selector=_COOLBLUE_STYLE_CONSENT,
    structural_selector=f"{_BOL_TITLE} > span.h-boxedright--xs",
    availability_selectors=AvailabilitySelectors(
        out_of_stock_notice=f"{_BOL_TITLE} > span.sub-title",
        purchase_action=".js_preventable_buy_action",
    ),
    expected_structural_text="Sony PlayStation 5 Console",
    expected_out_of_stock_text="UITVERKOCHT",
    expected_purchase_action_text="In winkelwagen",
)

COOLBLUE_NL = RetailerDescriptor(
    key="coolbluenl",
    display_name="Coolblue",
    locale="nl-NL",
    location="Netherlands",
    edition=Edition.DISC,
    target_url="https://www.coolblue.nl/product/865866/playstation-5.html",
    consent_prompt_selector=_COOLBLUE_STYLE_CONSENT,
    structural_selector="#main-content > h1 > span",
    availability_selectors=AvailabilitySelectors(
        out_of_stock_notice=(
            f"{_COOLBLUE_ORDER_BLOCK} > div:nth-child(1) > div > div"
            " > div.icon-with-text__text > div"
        ),
        purchase_action=(
            f"{_COOLBLUE_ORDER_BLOCK}"
            " > div.grid-section-xs--gap-4.grid-section-m--gap-5.js-order-block"
            " > div.js-desktop-order-block > div"
            " > div.grid-section-xs--gap-4.is-hidden-until-size-m > form"
            " > div.grid-section-xs--gap-4.is-hidden-until-size-m > button"
        ),
    ),
    expected_structural_text="PlayStation 5",
    expected_out_of_stock_text="Door een beperkte voorraad",
    expected_purchase_action_text="In mijn winkelwagen",
)

MEDIAMARKT_NL = RetailerDescriptor(
    key="mediamarktnl",
    display_name="Mediamarkt",
    locale="nl-NL",
    location="Netherlands",
    edition=Edition.DISC,
    target_url="https://www.mediamarkt.nl/nl/product/_sony-playstation-5-disk-edition-1664768.html",
    consent_prompt_selector=(
        "body > div.gdpr-cookie-layer.gdpr-cookie-layer--show > div"
        " > div.gdpr-cookie-layer__lower-section > div.gdpr-cookie-layer__submit-buttons"
        " > button.gdpr-cookie-layer__btn.gdpr-cookie-layer__btn--submit"
        ".gdpr-cookie-layer__btn--submit--all"
    ),
    structural_selector="#product-sidebar > h1",
    availability_selectors=AvailabilitySelectors(
        out_of_stock_notice=(
            "#product-details > div.price-sidebar.product-pricing.has-monthly-price"
            " > div.price-details > div.box.infobox.availability > ul"
            " > li.false.online-nostock > span"
        ),
        purchase_action="#pdp-add-to-cart",
    ),
    expected_structural_text="SONY PlayStation 5 Disk Edition",
    expected_out_of_stock_text="Online uitverkocht",
    expected_purchase_action_text="BESTEL NU",
)


RETAILERS: dict[str, RetailerDescriptor] = {
    d.key: d for d in (BOL_NL, COOLBLUE_NL, MEDIAMARKT_NL)
}


def get_retailer(key: str, edition: Edition | None = None) -> RetailerDescriptor:
    """
    Look up a retailer descriptor by key.

    Args:
        key: Registry key, e.g. "bolnl".
        edition: If given, the descriptor must list this edition.

    Raises:
        RegistryLookupFailure: unknown key or edition not listed.
    """
    descriptor = RETAILERS.get(key)
    if descriptor is None:
        raise RegistryLookupFailure(f"Retailer could not be found for value: '{key}'")
    if edition is not None and descriptor.edition != edition:
        raise RegistryLookupFailure(
            f"Retailer '{key}' does not list the {edition.value} edition"
        )
    return descriptor
