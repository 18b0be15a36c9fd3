"""Reference catalog loaded into a fresh store."""
import logging

from marketplace.schemas import Product, Provider, RateType, ServiceCategory
from marketplace.storage import EntityKind, Storage

logger = logging.getLogger(__name__)

_UNSPLASH = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w={}&h={}"


def _image(photo: str, width: int, height: int) -> str:
    return _UNSPLASH.format(photo, width, height)


# Account behind the placeholder request identity
DEMO_USER_PROFILE = {
    "username": "demo",
    "email": "demo@agbado.ng",
    "password": "",
    "first_name": "Demo",
    "last_name": "Shopper",
    "city": "Lagos",
}

SERVICE_CATEGORIES = [
    ServiceCategory(id="cat1", name="Home Cleaning", description="Professional home cleaning services",
                    icon="fas fa-home", color="blue", starting_price=5000),
    ServiceCategory(id="cat2", name="Repairs", description="Home and appliance repair services",
                    icon="fas fa-tools", color="green", starting_price=3000),
    ServiceCategory(id="cat3", name="Beauty", description="Beauty and personal care services",
                    icon="fas fa-cut", color="pink", starting_price=2500),
    ServiceCategory(id="cat4", name="Painting", description="Interior and exterior painting",
                    icon="fas fa-paint-brush", color="purple", starting_price=8000),
    ServiceCategory(id="cat5", name="Catering", description="Food and catering services",
                    icon="fas fa-utensils", color="orange", starting_price=15000),
    ServiceCategory(id="cat6", name="Delivery", description="Package and food delivery",
                    icon="fas fa-truck", color="teal", starting_price=1500),
]

PROVIDERS = [
    Provider(
        id="prov1",
        user_id="user1",
        business_name="Adebayo Carpentry",
        specialty="Master Carpenter",
        description="Expert in custom furniture, cabinet installation, and home woodwork. 15+ years of experience.",
        experience=15,
        rate=8000,
        rate_type=RateType.PER_DAY,
        rating="4.9",
        review_count=127,
        profile_image=_image("1472099645785-5658abf4ff4e", 100, 100),
        work_images=[_image("1507003211169-0a1dd7228f2d", 400, 250)],
        service_areas=["Lagos", "Abuja"],
        verified=True,
    ),
    Provider(
        id="prov2",
        user_id="user2",
        business_name="Fatima Hair Studio",
        specialty="Professional Stylist",
        description="Specializing in natural hair care, braiding, and modern cuts. Mobile service available.",
        experience=8,
        rate=5000,
        rate_type=RateType.PER_SESSION,
        rating="4.8",
        review_count=89,
        profile_image=_image("1494790108755-2616b612b5cc", 100, 100),
        work_images=[_image("1560472354-b33ff0c44a43", 400, 250)],
        service_areas=["Lagos", "Ibadan"],
        verified=True,
    ),
    Provider(
        id="prov3",
        user_id="user3",
        business_name="Chike Electrical",
        specialty="Licensed Electrician",
        description="Certified electrical work, installations, and emergency repairs. Quick response time.",
        experience=12,
        rate=6000,
        rate_type=RateType.PER_VISIT,
        rating="4.9",
        review_count=156,
        profile_image=_image("1507003211169-0a1dd7228f2d", 100, 100),
        work_images=[_image("1621905251189-08b45d6a269e", 400, 250)],
        service_areas=["Lagos", "Port Harcourt"],
        verified=True,
    ),
]


def _product(id, name, description, price, category, photo, rating, review_count, stock, seller_id, featured):
    return Product(
        id=id,
        name=name,
        description=description,
        price=price,
        category=category,
        images=[_image(photo, 400, 300)],
        rating=rating,
        review_count=review_count,
        stock=stock,
        seller_id=seller_id,
        featured=featured,
    )


PRODUCTS = [
    _product("prod1", "Handwoven Kente Cloth",
             "Authentic traditional Kente cloth, handwoven by skilled artisans",
             25000, "Crafts", "1544441892-794166f1e3be", "4.7", 23, 15, "user4", True),
    _product("prod2", "Bronze Artifacts",
             "Handcrafted bronze sculptures inspired by ancient Benin art",
             45000, "Crafts", "1513475382585-d06e58bcb0e0", "4.9", 12, 8, "user5", True),
    _product("prod3", "Beaded Jewelry Set",
             "Traditional coral beads necklace and earrings set",
             15000, "Jewelry", "1515562141207-7a88fb7ce338", "4.6", 34, 25, "user6", True),
    _product("prod4", "Carved Wooden Mask",
             "Authentic traditional mask carved from premium hardwood",
             35000, "Crafts", "1578662996442-48f60103fc96", "4.8", 18, 10, "user7", False),
    _product("prod5", "Traditional Pottery",
             "Handcrafted ceramic bowls and decorative pottery",
             12000, "Home Decor", "1578749556568-bc2c40e68b61", "4.5", 28, 20, "user8", False),
    _product("prod6", "Ankara Fabric",
             "Premium quality Ankara fabric in various vibrant patterns",
             8000, "Clothing", "1445205170230-053b83016050", "4.4", 42, 50, "user9", False),
    _product("prod7", "Traditional Drum",
             "Authentic djembe drum handcrafted by master artisans",
             28000, "Music", "1493225457124-a3eb161ffa5f", "4.7", 16, 12, "user10", False),
    _product("prod8", "Woven Baskets",
             "Set of handwoven storage baskets in various sizes",
             18000, "Home Decor", "1557804506-669a67965ba0", "4.6", 31, 18, "user11", False),
]


def seed_storage(storage: Storage) -> None:
    """Load the reference catalog if the store holds no products yet."""
    if storage.count(EntityKind.PRODUCTS) > 0:
        return

    storage.load(EntityKind.SERVICE_CATEGORIES, SERVICE_CATEGORIES)
    storage.load(EntityKind.PROVIDERS, PROVIDERS)
    storage.load(EntityKind.PRODUCTS, PRODUCTS)
    logger.info("Seeded storage with sample catalog", extra={
        "service_categories": len(SERVICE_CATEGORIES),
        "providers": len(PROVIDERS),
        "products": len(PRODUCTS),
    })
