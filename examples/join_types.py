#!/usr/bin/env python3
"""
Join Types Example
Runs every supported join type over two small tables and compares row counts.
"""

from planframe import Session


def main():
    print("=" * 70)
    print("Join Types Example")
    print("=" * 70)

    with Session() as session:
        customers = session.from_pydict(
            {"id": [1, 2, 3, 4], "name": ["Ann", "Ben", "Cy", "Di"]},
            name="customers",
        )
        orders = session.from_pydict(
            {
                "order_id": [10, 11, 12, 13],
                "customer_id": [1, 1, 3, 9],
                "total": [25.0, 40.0, 12.5, 99.0],
            },
            name="orders",
        )

        print("\nCustomers:")
        customers.show()
        print("\nOrders:")
        orders.show()

        keys = (["id"], ["customer_id"])
        descriptions = {
            "inner": "rows where the keys match on both sides",
            "left": "every customer, NULLs where no order matches",
            "right": "every order, NULLs where no customer matches",
            "full": "rows from both sides, NULLs where no match",
            "semi": "customers that have at least one order",
            "anti": "customers with no orders",
            "right_semi": "orders whose customer exists",
        }

        counts = {}
        for i, (how, description) in enumerate(descriptions.items(), 1):
            print("\n" + "=" * 70)
            print(f"{i}. {how.upper()} JOIN")
            print(f"   - {description}")
            print("=" * 70)
            joined = customers.join(orders, keys, how=how)
            joined.show()
            counts[how] = joined.count()

        print("\n" + "=" * 70)
        print("SUMMARY")
        print("=" * 70)
        for how, n in counts.items():
            print(f"{how.upper():<11} {n} rows")

        print("\nKey observations:")
        print(f"- LEFT ({counts['left']}) >= INNER ({counts['inner']})")
        print(f"- FULL ({counts['full']}) >= RIGHT ({counts['right']})")
        print(f"- SEMI ({counts['semi']}) + ANTI ({counts['anti']}) = 4 customers")


if __name__ == "__main__":
    main()
