"""Repository for the shop's fixed report queries."""

from __future__ import annotations

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from ..models import Car, ClosedRequest, Customer, Ownership, ServiceRequest
from ..tabular import QueryResult


class ReportRepository:
    """
    The five read-only reports offered on the menu.

    Each report is a single declarative query: a filter, an aggregate and a
    sort order. None of them branch on the data.
    """

    def __init__(self, session: Session):
        self.session = session

    def customers_with_bill_below(self, threshold: int = 100) -> QueryResult:
        """
        List closed requests billed strictly below `threshold`, with the customer's name.

        Args:
            threshold: Exclusive upper bound on the bill

        Returns:
            fname, lname, date, comment and bill per qualifying closed request
        """
        stmt = (
            select(
                Customer.fname,
                Customer.lname,
                ClosedRequest.date,
                ClosedRequest.comment,
                ClosedRequest.bill,
            )
            .join(ServiceRequest, ServiceRequest.customer_id == Customer.id)
            .join(ClosedRequest, ClosedRequest.rid == ServiceRequest.rid)
            .where(ClosedRequest.bill < threshold)
            .order_by(ClosedRequest.bill, ClosedRequest.wid)
        )
        return QueryResult.from_result(self.session.execute(stmt))

    def customers_with_more_cars_than(self, threshold: int = 20) -> QueryResult:
        """
        List customers owning more than `threshold` cars.

        Returns:
            fname, lname and car_count, largest fleets first
        """
        car_count = func.count(Ownership.car_vin).label("car_count")
        stmt = (
            select(Customer.fname, Customer.lname, car_count)
            .join(Ownership, Ownership.customer_id == Customer.id)
            .group_by(Customer.id, Customer.fname, Customer.lname)
            .having(func.count(Ownership.car_vin) > threshold)
            .order_by(desc("car_count"), Customer.id)
        )
        return QueryResult.from_result(self.session.execute(stmt))

    def cars_older_than_with_mileage_below(
        self, year: int = 1995, mileage: int = 50000
    ) -> QueryResult:
        """
        List cars built before `year` that came in with fewer than `mileage` on the odometer.

        A car qualifies if any of its service requests recorded an odometer
        reading below `mileage`; each car is listed once.

        Returns:
            vin, make, model and year per qualifying car
        """
        stmt = (
            select(Car.vin, Car.make, Car.model, Car.year)
            .join(ServiceRequest, ServiceRequest.car_vin == Car.vin)
            .where(Car.year < year, ServiceRequest.odometer < mileage)
            .distinct()
            .order_by(Car.year, Car.vin)
        )
        return QueryResult.from_result(self.session.execute(stmt))

    def top_cars_by_service_count(self, k: int) -> QueryResult:
        """
        List the `k` cars with the most service requests.

        Ties are broken by VIN so the listing is stable. Cars without any
        request are not listed.

        Args:
            k: Number of cars to list; must be positive

        Returns:
            vin, make, model and service_count

        Raises:
            ValueError: If k is not positive
        """
        if k < 1:
            raise ValueError(f"k must be positive, got {k}")
        service_count = func.count(ServiceRequest.rid).label("service_count")
        stmt = (
            select(Car.vin, Car.make, Car.model, service_count)
            .join(ServiceRequest, ServiceRequest.car_vin == Car.vin)
            .group_by(Car.vin, Car.make, Car.model)
            .order_by(desc("service_count"), Car.vin)
            .limit(k)
        )
        return QueryResult.from_result(self.session.execute(stmt))

    def customers_by_total_bill(self) -> QueryResult:
        """
        List customers by the total of their closed bills, highest first.

        Only customers with at least one closed request appear.

        Returns:
            fname, lname and total_bill
        """
        total_bill = func.sum(ClosedRequest.bill).label("total_bill")
        stmt = (
            select(Customer.fname, Customer.lname, total_bill)
            .join(ServiceRequest, ServiceRequest.customer_id == Customer.id)
            .join(ClosedRequest, ClosedRequest.rid == ServiceRequest.rid)
            .group_by(Customer.id, Customer.fname, Customer.lname)
            .order_by(desc("total_bill"), Customer.id)
        )
        return QueryResult.from_result(self.session.execute(stmt))
