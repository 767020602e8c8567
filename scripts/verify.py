"""
Data Verification Script

Checks the integrity of the configured store: uniqueness of emails and tax
ids, products pointing to missing restaurants, and the session state.
Run from project root: python scripts/verify.py

Version: 1.0.0
"""

import asyncio
import os
import sys
from collections import Counter
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cardapio.context import open_context
from cardapio.core.utils import format_price, only_digits


async def verify_store() -> bool:
    """Print an integrity report; returns False when problems are found."""

    print("=" * 60)
    print("🔍 DATA VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    problems = 0

    async with open_context() as ctx:
        print(f"📦 Storage: {ctx.backend.provider_name} ({ctx.settings.storage_namespace})")
        print("=" * 60)

        if not await ctx.backend.health_check():
            print("\n❌ Storage backend is not reachable!")
            return False

        users = await ctx.users.list()
        restaurants = await ctx.restaurants.list()
        products = await ctx.products.list()

        # Statistics
        admins = sum(1 for user in users if user.is_admin)
        print(f"\n📊 STATISTICS:")
        print(f"   Users: {len(users)} ({admins} admins)")
        print(f"   Restaurants: {len(restaurants)}")
        print(f"   Products: {len(products)}")

        # Duplicate emails
        emails = Counter(user.email.lower() for user in users)
        duplicated_emails = [email for email, count in emails.items() if count > 1]
        if duplicated_emails:
            problems += len(duplicated_emails)
            print(f"\n⚠️ Duplicate emails: {duplicated_emails}")
        else:
            print(f"\n✅ No duplicate emails")

        # Duplicate tax ids
        tax_ids = Counter(only_digits(r.tax_id) for r in restaurants)
        duplicated_tax_ids = [tax_id for tax_id, count in tax_ids.items() if count > 1]
        if duplicated_tax_ids:
            problems += len(duplicated_tax_ids)
            print(f"⚠️ Duplicate tax ids: {duplicated_tax_ids}")
        else:
            print(f"✅ No duplicate tax ids")

        # Orphan products
        restaurant_ids = {r.id for r in restaurants}
        orphans = [p for p in products if p.restaurant_id not in restaurant_ids]
        if orphans:
            problems += len(orphans)
            print(f"⚠️ {len(orphans)} products point to missing restaurants:")
            for product in orphans[:10]:
                print(f"   - {product.id} {product.name} -> {product.restaurant_id}")
        else:
            print(f"✅ Every product belongs to a restaurant")

        # Menu value
        if products:
            total = sum(p.price for p in products)
            print(f"\n💰 PRICES:")
            print(f"   Average: {format_price(total / len(products))}")
            print(f"   Cheapest: {format_price(min(p.price for p in products))}")
            print(f"   Most expensive: {format_price(max(p.price for p in products))}")

        # Session
        info = await ctx.sessions.get_session_info()
        print(f"\n🔐 SESSION:")
        if info.user is None:
            print("   No session stored")
        else:
            active = await ctx.sessions.has_active_session()
            status = "active" if active else "expired or inactive"
            print(f"   {info.user.email} ({info.user.role.value}), {status}")
            print(f"   Logged in for {info.minutes_logged_in} minutes")

    print("\n" + "=" * 60)
    if problems:
        print(f"❌ {problems} problems found")
    else:
        print("✅ Store is consistent")
    print("=" * 60)
    return problems == 0


if __name__ == "__main__":
    success = asyncio.run(verify_store())
    sys.exit(0 if success else 1)
