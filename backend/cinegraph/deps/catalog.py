"""
Catalog dependency — hands routes the process-wide search index.

The index is built once in the application lifespan and parked on
app.state; routes receive it through Depends so tests can override it.

Usage in any route:
    from cinegraph.deps.catalog import get_catalog
    from cinegraph.services.catalog_index import CatalogIndex

    @router.get("/search")
    def search(catalog: CatalogIndex = Depends(get_catalog)):
        ...
"""
from fastapi import Request

from cinegraph.services.catalog_index import CatalogIndex


def get_catalog(request: Request) -> CatalogIndex:
    return request.app.state.catalog
