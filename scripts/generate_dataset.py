"""
Synthetic Gold Layer Generator
Writes dim_customers, dim_products and fact_sales exports for local runs:

    python scripts/generate_dataset.py
    gold-analytics --source data/gold reports
"""

import random
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import polars as pl
from faker import Faker

fake = Faker()
random.seed(42)
np.random.seed(42)
Faker.seed(42)

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "gold"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

FIRST_ORDER = date(2020, 12, 29)
ORDER_DAYS = 3 * 365

CATEGORIES = {
    "Bikes": ["Mountain Bikes", "Road Bikes", "Touring Bikes"],
    "Components": ["Handlebars", "Wheels", "Saddles", "Chains"],
    "Clothing": ["Jerseys", "Caps", "Gloves", "Socks"],
    "Accessories": ["Helmets", "Bottles and Cages", "Tires and Tubes"],
}


# ==========================================
# CUSTOMERS
# ==========================================
def generate_customers(n=2000):
    print(f"📊 Generating {n:,} customers...")

    birthdates = [
        fake.date_of_birth(minimum_age=18, maximum_age=85) if random.random() > 0.01 else None
        for _ in range(n)
    ]

    df = pl.DataFrame({
        "customer_key": np.arange(1, n + 1),
        "customer_id": np.arange(11000, 11000 + n),
        "customer_number": [f"AW{11000 + i:08d}" for i in range(n)],
        "first_name": [fake.first_name() for _ in range(n)],
        "last_name": [fake.last_name() for _ in range(n)],
        "country": np.random.choice(
            ["United States", "Australia", "United Kingdom", "Germany", "France", "Canada", "n/a"],
            n, p=[0.30, 0.20, 0.12, 0.12, 0.12, 0.12, 0.02],
        ),
        "marital_status": np.random.choice(["Married", "Single"], n),
        "gender": np.random.choice(["Male", "Female", "n/a"], n, p=[0.49, 0.49, 0.02]),
        "birthdate": pl.Series(birthdates, dtype=pl.Date),
        "create_date": [FIRST_ORDER - timedelta(days=random.randint(0, 30)) for _ in range(n)],
    })

    df.write_csv(OUTPUT_DIR / "dim_customers.csv")
    print(f"   ✅ dim_customers.csv: {n:,} rows")
    return df


# ==========================================
# PRODUCTS
# ==========================================
def generate_products(n=300):
    print(f"📊 Generating {n:,} products...")

    categories = np.random.choice(list(CATEGORIES), n, p=[0.35, 0.25, 0.2, 0.2])
    sub_categories = [random.choice(CATEGORIES[c]) for c in categories]
    base_cost = {"Bikes": (300, 1500), "Components": (20, 400), "Clothing": (5, 60), "Accessories": (2, 50)}

    df = pl.DataFrame({
        "product_key": np.arange(1, n + 1),
        "product_id": np.arange(200, 200 + n),
        "product_number": [f"{c[:2].upper()}-{i:04d}" for i, c in enumerate(categories)],
        "product_name": [f"{fake.word().title()} {s.rstrip('s')} {i}" for i, s in enumerate(sub_categories)],
        "category_id": [c[:2].upper() for c in categories],
        "category": categories,
        "sub_category": sub_categories,
        "maintenance": np.random.choice(["Yes", "No"], n),
        "cost": [random.randint(*base_cost[c]) for c in categories],
        "product_line": np.random.choice(["Road", "Mountain", "Touring", "Other Sales"], n),
        "start_date": [FIRST_ORDER - timedelta(days=random.randint(0, 365)) for _ in range(n)],
    })

    df.write_csv(OUTPUT_DIR / "dim_products.csv")
    print(f"   ✅ dim_products.csv: {n:,} rows")
    return df


# ==========================================
# SALES
# ==========================================
def generate_sales(n_orders=20000, customers_df=None, products_df=None):
    print(f"📊 Generating sale lines for {n_orders:,} orders...")

    customer_keys = customers_df["customer_key"].to_list()
    product_keys = products_df["product_key"].to_list()
    costs = dict(zip(product_keys, products_df["cost"].to_list()))

    rows = []
    for i in range(n_orders):
        order_number = f"SO{43697 + i}"
        customer_key = random.choice(customer_keys)
        order_date = FIRST_ORDER + timedelta(days=random.randint(0, ORDER_DAYS))
        if random.random() < 0.001:
            order_date = None

        for product_key in random.sample(product_keys, random.randint(1, 3)):
            quantity = 1 if random.random() < 0.97 else random.randint(2, 4)
            price = round(costs[product_key] * random.uniform(1.1, 1.6))
            rows.append({
                "order_number": order_number,
                "product_key": product_key,
                "customer_key": customer_key,
                "order_date": order_date,
                "shipping_date": order_date + timedelta(days=7) if order_date else None,
                "due_date": order_date + timedelta(days=12) if order_date else None,
                "sales_amount": price * quantity,
                "quantity": quantity,
                "price": price,
            })

    df = pl.DataFrame(rows)
    df.write_csv(OUTPUT_DIR / "fact_sales.csv")
    print(f"   ✅ fact_sales.csv: {len(rows):,} rows")
    return df


# ==========================================
# MAIN
# ==========================================
def main():
    print("=" * 60)
    print("🏅 Synthetic Gold Layer Generator")
    print("=" * 60 + "\n")

    customers_df = generate_customers(2000)
    products_df = generate_products(300)
    generate_sales(20000, customers_df, products_df)

    print("\n" + "=" * 60)
    print("✅ Dataset Generation Complete!")
    print("=" * 60)
    print(f"\n📁 Output: {OUTPUT_DIR}\n")


if __name__ == "__main__":
    main()
