from sqlmodel import Session, col, select

from merchcore.entities.shipping.entity import RateTableShippingMethod, ShipCountry
from merchcore.entities.shipping.table import ShipCountryTable, ShipMethodTable


class ShipCountryRepository:
    """Data-access layer for ship countries."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> ShipCountry | None:
        row = self._session.get(ShipCountryTable, key)
        if row is None:
            return None
        return ShipCountry.model_validate(row, from_attributes=True)

    def get_by_country_code(self, catalog_key: str, country_code: str) -> ShipCountry | None:
        statement = select(ShipCountryTable).where(
            (ShipCountryTable.catalog_key == catalog_key)
            & (ShipCountryTable.country_code == country_code.upper())
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return ShipCountry.model_validate(row, from_attributes=True)

    def save(self, ship_country: ShipCountry) -> ShipCountry:
        ship_country.touch()
        row = self._session.get(ShipCountryTable, ship_country.key)
        if row is None:
            row = ShipCountryTable(
                key=ship_country.key,
                created_at=ship_country.created_at,
                country_code=ship_country.country_code,
            )
        row.catalog_key = ship_country.catalog_key
        row.country_code = ship_country.country_code.upper()
        row.name = ship_country.name
        row.provider_keys = list(ship_country.provider_keys)
        row.updated_at = ship_country.updated_at
        self._session.add(row)
        self._session.flush()
        return ship_country


class ShipMethodRepository:
    """Data-access layer for rate table shipping methods."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> RateTableShippingMethod | None:
        row = self._session.get(ShipMethodTable, key)
        if row is None:
            return None
        return RateTableShippingMethod.model_validate(row, from_attributes=True)

    def list_for(self, ship_country_key: str, provider_key: str) -> list[RateTableShippingMethod]:
        statement = (
            select(ShipMethodTable)
            .where(
                (ShipMethodTable.ship_country_key == ship_country_key)
                & (ShipMethodTable.provider_key == provider_key)
            )
            .order_by(col(ShipMethodTable.created_at), col(ShipMethodTable.name))
        )
        return [
            RateTableShippingMethod.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def save(self, method: RateTableShippingMethod) -> RateTableShippingMethod:
        method.touch()
        row = self._session.get(ShipMethodTable, method.key)
        if row is None:
            row = ShipMethodTable(
                key=method.key,
                created_at=method.created_at,
                ship_country_key=method.ship_country_key,
                provider_key=method.provider_key,
                name=method.name,
                rate_table_type=method.rate_table_type.value,
            )
        row.ship_country_key = method.ship_country_key
        row.provider_key = method.provider_key
        row.name = method.name
        row.service_code = method.service_code
        row.rate_table_type = method.rate_table_type.value
        row.taxable = method.taxable
        row.rate_table = [tier.model_dump(mode="json") for tier in method.rate_table]
        row.updated_at = method.updated_at
        self._session.add(row)
        self._session.flush()
        return method

    def delete(self, key: str) -> bool:
        row = self._session.get(ShipMethodTable, key)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
