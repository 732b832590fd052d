from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

SEED_PRODUCTS = [
    # name, category, price, restaurant_id, available
    ("Margherita Pizza", "pizza", "42.90", 1, True),
    ("Pepperoni Pizza", "pizza", "49.90", 1, True),
    ("Garlic Bread", "sides", "14.50", 1, True),
    ("Classic Burger", "burgers", "32.00", 2, True),
    ("Cheese Fries", "sides", "18.90", 2, True),
    ("Chocolate Milkshake", "drinks", "16.00", 2, False),
    ("Salmon Poke", "poke", "54.90", 3, True),
    ("Green Tea", "drinks", "8.50", 3, True),
]


class Command(BaseCommand):
    help = "Seed the database with catalog products and sample orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=20,
            help="Number of orders to create (default: 20).",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        products = self._seed_products()
        orders_created = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for name, category, price, restaurant_id, available in SEED_PRODUCTS:
            product, _ = Product.objects.get_or_create(
                name=name,
                restaurant_id=restaurant_id,
                defaults={
                    "category": category,
                    "price": Decimal(price),
                    "is_available": available,
                },
            )
            products.append(product)
        return products

    @transaction.atomic
    def _seed_orders(self, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_catalog=ProductDjangoRepository(),
        )
        available = [product for product in products if product.is_available]
        now = timezone.now()

        for _ in range(count):
            restaurant_id = random.choice([1, 2, 3])
            menu = [p for p in available if p.restaurant_id == restaurant_id]
            order = service.create_order(
                customer_id=random.randint(1, 10), restaurant_id=restaurant_id
            )
            for product in random.sample(menu, k=min(len(menu), random.randint(1, 3))):
                service.add_item(order.id, product.id, random.randint(1, 3))

            outcome = random.choice(
                [None, OrderStatus.CONFIRMED, OrderStatus.DELIVERED, "cancel"]
            )
            if outcome == OrderStatus.CONFIRMED:
                service.confirm(order.id)
            elif outcome == OrderStatus.DELIVERED:
                service.confirm(order.id)
                service.update_status(order.id, OrderStatus.DELIVERED)
            elif outcome == "cancel":
                service.cancel(order.id, notes="Seeded cancellation")

            # spread orders over the last month so date filters have data
            Order.objects.filter(id=order.id).update(
                placed_at=now - timedelta(days=random.randint(0, 30))
            )
        return count
