"""
Seed Script

Fills the configured store with an admin account and sample restaurants
and products, going through the controllers like the app does.
Run from project root: python scripts/seed.py

Version: 1.0.0
"""

import argparse
import asyncio
import os
import random
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from cardapio.context import open_context
from cardapio.core.config import setup_logging
from cardapio.core.utils import format_postal_code, format_price, format_tax_id
from cardapio.schemas import UserRole
from cardapio.services.postal.mock import KNOWN_ADDRESSES

# Sample data
RESTAURANT_NAMES = [
    "Cantina da Nonna", "Sabor Mineiro", "Boteco do Zé", "Sushi Kai",
    "Churrascaria Gaúcha", "Pizzaria Bella", "Tapiocaria Nordeste", "Bistrô Paulista",
]
CATEGORIES = ["Pratos principais", "Entradas", "Sobremesas", "Bebidas"]
DISHES = [
    ("Feijoada", "Feijoada completa com arroz, couve e farofa", "Pratos principais"),
    ("Moqueca", "Moqueca de peixe com leite de coco e dendê", "Pratos principais"),
    ("Pão de queijo", "Porção com dez pães de queijo quentinhos", "Entradas"),
    ("Coxinha", "Coxinha de frango com catupiry, seis unidades", "Entradas"),
    ("Pudim", "Pudim de leite condensado com calda de caramelo", "Sobremesas"),
    ("Brigadeiro", "Caixa com seis brigadeiros gourmet", "Sobremesas"),
    ("Suco de caju", "Suco natural de caju, copo de 400ml", "Bebidas"),
    ("Guaraná", "Refrigerante de guaraná, lata de 350ml", "Bebidas"),
]


def random_tax_id() -> str:
    """Random 14-digit CNPJ that is not a single repeated digit."""
    while True:
        digits = "".join(random.choice("0123456789") for _ in range(14))
        if len(set(digits)) > 1:
            return format_tax_id(digits)


async def ensure_admin(ctx, email: str, password: str) -> bool:
    """Sign in as the admin, registering the account on first run."""
    result = await ctx.auth.login(email, password)
    if result.success:
        print(f"   ✅ Signed in as {email}")
        return True

    result = await ctx.auth.register(
        name="Administrador",
        email=email,
        password=password,
        confirm_password=password,
        role=UserRole.ADMIN,
    )
    if result.success:
        print(f"   ✅ Admin {email} registered")
        return True

    print(f"   ❌ Could not sign in: {result.error}")
    return False


async def build_address(ctx, postal_code: str) -> dict:
    lookup = await ctx.restaurant_controller.lookup_address(postal_code)
    address = lookup.address if lookup.success else None
    return {
        "street": address.street if address else "Rua das Flores",
        "number": str(random.randint(1, 2000)),
        "postal_code": format_postal_code(postal_code),
        "neighborhood": address.neighborhood if address else "Centro",
        "city": address.city if address else "São Paulo",
        "state": address.state if address else "SP",
        "latitude": round(random.uniform(-33.0, 5.0), 6),
        "longitude": round(random.uniform(-73.0, -35.0), 6),
    }


async def seed(num_restaurants: int, num_products: int, admin_email: str, admin_password: str) -> bool:
    print("=" * 60)
    print("🌱 SEEDING CARDAPIO DATA")
    print("=" * 60)

    async with open_context() as ctx:
        print(f"📦 Storage: {ctx.backend.provider_name}")

        if not await ensure_admin(ctx, admin_email, admin_password):
            return False

        postal_codes = list(KNOWN_ADDRESSES)
        created_restaurants = 0
        created_products = 0

        for i in range(num_restaurants):
            name = RESTAURANT_NAMES[i % len(RESTAURANT_NAMES)]
            if i >= len(RESTAURANT_NAMES):
                name = f"{name} {i // len(RESTAURANT_NAMES) + 1}"

            result = await ctx.restaurant_controller.create_restaurant({
                "name": name,
                "tax_id": random_tax_id(),
                "address": await build_address(ctx, random.choice(postal_codes)),
            })
            if not result.success:
                print(f"   ⚠️ {name}: {result.error}")
                continue

            restaurant = result.restaurant
            created_restaurants += 1
            print(f"\n🏪 {restaurant.name} ({restaurant.address.city}/{restaurant.address.state})")

            for dish_name, description, category in random.sample(DISHES, min(num_products, len(DISHES))):
                price = round(random.uniform(6, 90), 2)
                product_result = await ctx.product_controller.create_product({
                    "name": dish_name,
                    "description": description,
                    "price": price,
                    "image_url": f"https://picsum.photos/seed/{random.randint(1, 10_000)}/400/300",
                    "restaurant_id": restaurant.id,
                    "category": category,
                })
                if product_result.success:
                    created_products += 1
                    print(f"   🍽️  {dish_name:<16} {format_price(price)}")
                else:
                    print(f"   ⚠️ {dish_name}: {product_result.error}")

        print("\n" + "=" * 60)
        print(f"✅ Restaurants created: {created_restaurants}")
        print(f"✅ Products created:    {created_products}")
        print("=" * 60)
        return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the store with sample data")
    parser.add_argument("--restaurants", type=int, default=3, help="Number of restaurants")
    parser.add_argument("--products", type=int, default=4, help="Products per restaurant")
    parser.add_argument("--admin-email", default="admin@cardapio.com", help="Admin account email")
    parser.add_argument("--admin-password", default="admin123", help="Admin account password")
    args = parser.parse_args()

    setup_logging()
    ok = asyncio.run(seed(args.restaurants, args.products, args.admin_email, args.admin_password))
    sys.exit(0 if ok else 1)
