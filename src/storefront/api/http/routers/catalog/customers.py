"""Customer API router, including the customer address listing.

Customer bodies are sent unwrapped; the only nested key is ``CustomerAddress``.
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from src.storefront.api.http.deps import get_db_session, get_list_engine, get_list_params
from src.storefront.api.http.responses import (
    conflict,
    created,
    deleted,
    not_found,
    ok,
    parse_id,
    transaction,
    updated,
    validation_error,
)
from src.storefront.core.formatting import epoch_to_date, normalize_digits, timestamp
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.core.security import hash_password
from src.storefront.entities.catalog.customer import (
    AddressTable,
    CustomerCreate,
    CustomerPatch,
    CustomerRepository,
    UserTable,
    country_display_name,
)

router = APIRouter(prefix="/customers", tags=["customers"])

SORTABLE = {
    "id": UserTable.id,
    "name": UserTable.name,
    "email": UserTable.email,
    "cpf": UserTable.cpf,
    "phone": UserTable.phone,
    "created_at": UserTable.created_at,
    "updated_at": UserTable.updated_at,
}

ADDRESS_SORTABLE = {
    "id": AddressTable.id,
    "user_id": AddressTable.user_id,
    "address": AddressTable.address,
    "postal_code": AddressTable.postal_code,
    "created_at": AddressTable.created_at,
    "updated_at": AddressTable.updated_at,
}

DUPLICATE_EMAIL = "There is already a record with the given email."
DUPLICATE_CPF = "There is already a record with the given cpf."


def default_password(cpf: str) -> str:
    """Customers created without a password log in with the first six cpf digits."""
    return normalize_digits(cpf)[:6]


def customer_view(
    row: UserTable, address: AddressTable | None, names: dict[str, str | None]
) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "cpf": row.cpf,
        "email": row.email,
        "phone": row.phone,
        "country": country_display_name(names.get("country")),
        "state": names.get("state"),
        "city": names.get("city"),
        "created": timestamp(row.created_at),
        "modified": timestamp(row.updated_at),
        "CustomerAddress": {"id": address.id if address else None},
    }


def address_view(row: AddressTable, names: dict[str, str | None]) -> dict:
    return {
        "id": row.id,
        "user_id": row.user_id,
        "address": row.address,
        "country": country_display_name(names.get("country")),
        "state": names.get("state"),
        "city": names.get("city"),
        "longitude": row.longitude,
        "latitude": row.latitude,
        "zip_code": row.postal_code,
        "default_address": row.set_default != 0,
        "created_at": timestamp(row.created_at),
        "updated_at": timestamp(row.updated_at),
    }


def _location_errors(
    index: int, requested: dict[str, str | None], resolved: tuple[int | None, ...]
) -> dict[str, list[str]]:
    errors = {}
    for (level, name), found in zip(requested.items(), resolved, strict=True):
        if name and found is None:
            errors[f"CustomerAddress.{index}.{level}"] = [
                f"There is no data for the given {level}: {name}"
            ]
    return errors


# --- Addresses ---


@router.get("/addresses")
def list_addresses(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
) -> dict:
    """List the addresses of every user."""

    def view(rows: list[AddressTable]) -> list[dict]:
        names = CustomerRepository(session).location_names(rows)
        return [{"CustomerAddress": address_view(row, names[row.id])} for row in rows]

    data = engine.run(
        select(AddressTable),
        params,
        sortable=ADDRESS_SORTABLE,
        id_column=AddressTable.id,
        collection="CustomerAddresses",
        view=view,
    )
    return ok(data)


@router.get("/addresses/{address_id}")
def get_address(address_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get an address by ID."""
    repository = CustomerRepository(session)
    row = repository.get_address(parse_id(address_id))
    if row is None:
        raise not_found()
    names = repository.location_names([row])
    return ok({"CustomerAddress": address_view(row, names[row.id])})


# --- Customers ---


@router.get("")
def list_customers(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
) -> dict:
    """List customers with the location of their first address."""

    def view(rows: list[UserTable]) -> list[dict]:
        repository = CustomerRepository(session)
        addresses = repository.first_addresses(row.id for row in rows)
        names = repository.location_names(addresses.values())
        items = []
        for row in rows:
            address = addresses.get(row.id)
            location = names.get(address.id, {}) if address else {}
            items.append({"Customer": customer_view(row, address, location)})
        return items

    data = engine.run(
        select(UserTable).where(UserTable.user_type == "customer"),
        params,
        sortable=SORTABLE,
        id_column=UserTable.id,
        collection="Customers",
        view=view,
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_customer(payload: CustomerCreate, session: Session = Depends(get_db_session)):
    """Create a customer and their addresses.

    Locations are matched by name; the password defaults to the first six
    digits of the cpf and is stored hashed.
    """
    repository = CustomerRepository(session)
    cpf = normalize_digits(payload.cpf)
    if repository.email_taken(payload.email):
        raise conflict(DUPLICATE_EMAIL)
    if repository.cpf_taken(cpf):
        raise conflict(DUPLICATE_CPF)

    addresses: list[AddressTable] = []
    errors: dict[str, list[str]] = {}
    for index, item in enumerate(payload.addresses):
        requested = {"country": item.country, "state": item.state, "city": item.city}
        resolved = repository.resolve_location(item.country, item.state, item.city)
        errors.update(_location_errors(index, requested, resolved))
        country_id, state_id, city_id = resolved
        addresses.append(
            AddressTable(
                user_id=0,
                address=item.address,
                country_id=country_id,
                state_id=state_id,
                city_id=city_id,
                postal_code=normalize_digits(item.zip_code),
                set_default=1 if item.default_address else 0,
            )
        )
    if errors:
        raise validation_error(errors)

    with transaction(session):
        row = repository.add(
            UserTable(
                user_type="customer",
                name=payload.name,
                email=payload.email,
                cpf=cpf,
                phone=normalize_digits(payload.phone),
                password=hash_password(payload.password or default_password(cpf)),
            ),
            addresses,
        )
    return created("User", "user_id", row.id)


@router.get("/{customer_id}")
def get_customer(customer_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get a customer with their order totals and first address."""
    repository = CustomerRepository(session)
    row = repository.get(parse_id(customer_id))
    if row is None:
        raise not_found()

    address = repository.first_addresses([row.id]).get(row.id)
    location = repository.location_names([address])[address.id] if address else {}
    total_orders, last_purchase = repository.order_stats(row.id)

    view = customer_view(row, address, location)
    view.update(
        total_orders=total_orders,
        last_purchase=epoch_to_date(last_purchase),
        address=address.address if address else None,
        zip_code=address.postal_code if address else None,
    )
    return ok({"Customer": view})


@router.put("/{customer_id}", status_code=201)
def update_customer(
    customer_id: str,
    payload: CustomerPatch,
    session: Session = Depends(get_db_session),
):
    """Update the supplied customer fields and addresses (matched by id)."""
    repository = CustomerRepository(session)
    row = repository.get(parse_id(customer_id))
    if row is None:
        raise not_found()

    columns: dict = {}
    if payload.name is not None:
        columns["name"] = payload.name
    if payload.email is not None:
        if repository.email_taken(payload.email, exclude_id=row.id):
            raise conflict(DUPLICATE_EMAIL)
        columns["email"] = payload.email
    if payload.cpf is not None:
        cpf = normalize_digits(payload.cpf)
        if repository.cpf_taken(cpf, exclude_id=row.id):
            raise conflict(DUPLICATE_CPF)
        columns["cpf"] = cpf
    if payload.phone is not None:
        columns["phone"] = normalize_digits(payload.phone)
    if payload.password:
        columns["password"] = hash_password(payload.password)

    changed_addresses: list[tuple[AddressTable, dict]] = []
    errors: dict[str, list[str]] = {}
    for index, item in enumerate(payload.addresses or []):
        address = repository.customer_address(row.id, item.id)
        if address is None:
            errors[f"CustomerAddress.{index}.id"] = [
                f"There is no address with the given id for this customer: {item.id}"
            ]
            continue

        address_columns: dict = {}
        requested = {"country": item.country, "state": item.state, "city": item.city}
        if any(requested.values()):
            resolved = repository.resolve_location(
                item.country,
                item.state,
                item.city,
                country_id=address.country_id,
                state_id=address.state_id,
                city_id=address.city_id,
            )
            errors.update(_location_errors(index, requested, resolved))
            address_columns.update(zip(("country_id", "state_id", "city_id"), resolved))
        if item.address:
            address_columns["address"] = item.address
        if item.zip_code:
            address_columns["postal_code"] = normalize_digits(item.zip_code)
        if item.default_address is not None:
            address_columns["set_default"] = 1 if item.default_address else 0
        if item.latitude is not None:
            address_columns["latitude"] = item.latitude
        if item.longitude is not None:
            address_columns["longitude"] = item.longitude
        changed_addresses.append((address, address_columns))
    if errors:
        raise validation_error(errors)

    with transaction(session):
        row.apply(columns)
        repository.save(row)
        for address, address_columns in changed_addresses:
            address.apply(address_columns)
            repository.save(address)
    return updated("User", "user_id", row.id)


@router.delete("/{customer_id}")
def delete_customer(customer_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete a customer and their addresses."""
    repository = CustomerRepository(session)
    row = repository.get(parse_id(customer_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("User")
