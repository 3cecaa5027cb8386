from storefront.schemas.base import CamelModel


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    image_url: str


class ProductResponse(CamelModel):
    id: int
    name: str
    description: str
    price: int
    image_url: str
    category_id: int
    stock: int
