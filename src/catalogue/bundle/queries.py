"""Read-side helpers for bundles."""

from protean.utils.globals import current_domain

from catalogue.bundle.bundle import Bundle


def bundles_containing(product_id: str) -> list:
    """Bundles that list ``product_id`` as a component."""
    bundles = current_domain.repository_for(Bundle)._dao.query.limit(None).all().items
    return [bundle for bundle in bundles if any(component == product_id for component, _ in bundle.components)]
