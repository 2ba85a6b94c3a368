#!/usr/bin/env python3
"""
Quickstart: build a plan, look at it, run it.
"""

import planframe.functions as f
from planframe import Session, col, order_by, window


def main():
    with Session() as session:
        employees = session.from_pylist(
            [
                {"emp_id": 1, "dept": "eng", "name": "Alice", "salary": 120},
                {"emp_id": 2, "dept": "eng", "name": "Bob", "salary": 100},
                {"emp_id": 3, "dept": "ops", "name": "Carol", "salary": 80},
                {"emp_id": 4, "dept": "ops", "name": "Dan", "salary": None},
                {"emp_id": 5, "dept": "sales", "name": "Eve", "salary": 95},
            ],
            name="employees",
        )

        print("Schema:", employees.schema())

        # Nothing runs until show()/collect()
        well_paid = (
            employees.filter(col("salary") > 90)
            .with_column("name_upper", f.upper(col("name")))
            .sort(order_by(col("salary"), asc=False))
        )
        print("\nPlan as built:")
        print(well_paid.logical_plan())
        print("\nWell paid:")
        well_paid.show()

        print("\nBy department:")
        employees.aggregate(
            [col("dept")],
            [
                f.count(col("emp_id")).alias("headcount"),
                f.avg(col("salary")).alias("avg_salary"),
            ],
        ).sort(col("dept")).show()

        print("\nRank within department:")
        employees.select(
            col("dept"),
            col("name"),
            window(
                "rank",
                [],
                partition_by=[col("dept")],
                order_by=[order_by(col("salary"), asc=False, nulls_first=False)],
            ).alias("rank"),
        ).sort(col("dept"), col("rank")).show()

        print("\nEngine plan:")
        well_paid.explain()


if __name__ == "__main__":
    main()
