"""Catalog API router: service categories, providers and products."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from opentelemetry import trace

from marketplace.dependencies import get_catalog_service
from marketplace.schemas import Product, Provider, ServiceCategory
from marketplace.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/service-categories", response_model=List[ServiceCategory])
async def list_service_categories(
    catalog: CatalogService = Depends(get_catalog_service)
):
    """List every service category."""
    return catalog.list_service_categories()


@router.get("/providers", response_model=List[Provider])
async def list_providers(
    category: Optional[str] = Query(None, description="Matched against provider specialty"),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """
    List providers.

    ``category`` is a case-insensitive substring of the specialty, so
    ``carpenter`` finds a "Master Carpenter".
    """
    providers = catalog.list_providers(category)
    trace.get_current_span().set_attribute("provider.count", len(providers))
    return providers


@router.get("/providers/{provider_id}", response_model=Provider)
async def get_provider(
    provider_id: str = Path(..., description="Provider ID"),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """Get a provider by id."""
    provider = catalog.get_provider(provider_id)
    if provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return provider


@router.get("/products", response_model=List[Product])
async def list_products(
    category: Optional[str] = Query(None, description="Exact category, case-insensitive"),
    featured: Optional[bool] = Query(None),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """
    List products.

    ``featured=true`` wins over ``category`` when both are supplied.
    """
    products = catalog.list_products(category=category, featured=bool(featured))
    trace.get_current_span().set_attribute("product.count", len(products))
    return products


@router.get("/products/{product_id}", response_model=Product)
async def get_product(
    product_id: str = Path(..., description="Product ID"),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """Get a product by id."""
    product = catalog.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    span = trace.get_current_span()
    span.set_attribute("product.id", product_id)
    span.set_attribute("product.category", product.category)
    return product
