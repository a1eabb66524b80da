from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.users.models import UserRole
from src.utils.field_update import UNSET, FieldUpdate, from_payload


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Address(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""


class Employee(CamelModel):
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.EMPLOYEE
    employee_id: str = ""
    position: str = ""
    department: str = ""
    hourly_rate: Decimal = Decimal("0")
    phone_number: str = ""
    avatar: str = ""
    address: Address = Field(default_factory=Address)


class AddressIn(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None


class EmployeeCreate(CamelModel):
    email: EmailStr
    password: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.EMPLOYEE
    employee_id: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    hourly_rate: Decimal = Field(Decimal("0"), ge=0)
    phone_number: Optional[str] = None
    address: Optional[AddressIn] = None


class RegisterIn(EmployeeCreate):
    password: str = Field(..., min_length=6)


@dataclass
class AddressUpdate:
    street: FieldUpdate[str] = UNSET
    city: FieldUpdate[str] = UNSET
    state: FieldUpdate[str] = UNSET
    country: FieldUpdate[str] = UNSET
    zip_code: FieldUpdate[str] = UNSET


@dataclass
class EmployeeUpdate:
    email: FieldUpdate[str] = UNSET
    first_name: FieldUpdate[str] = UNSET
    last_name: FieldUpdate[str] = UNSET
    role: FieldUpdate[UserRole] = UNSET
    employee_id: FieldUpdate[str] = UNSET
    position: FieldUpdate[str] = UNSET
    department: FieldUpdate[str] = UNSET
    hourly_rate: FieldUpdate[Decimal] = UNSET
    phone_number: FieldUpdate[str] = UNSET
    avatar: FieldUpdate[str] = UNSET
    address: AddressUpdate = field(default_factory=AddressUpdate)


class AddressPatch(AddressIn):
    def to_update(self) -> AddressUpdate:
        sent = self.model_fields_set
        return AddressUpdate(**{
            name: from_payload(sent, name, getattr(self, name))
            for name in ("street", "city", "state", "country", "zip_code")
        })


class EmployeePatch(CamelModel):
    """Partial update body: absent keys are left alone, explicit nulls clear."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    employee_id: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    phone_number: Optional[str] = None
    avatar: Optional[str] = None
    address: Optional[AddressPatch] = None

    def to_update(self) -> EmployeeUpdate:
        sent = self.model_fields_set
        update = EmployeeUpdate(**{
            name: from_payload(sent, name, getattr(self, name))
            for name in (
                "email", "first_name", "last_name", "role", "employee_id", "position",
                "department", "hourly_rate", "phone_number", "avatar",
            )
        })
        if self.address is not None:
            update.address = self.address.to_update()
        return update


class ProfilePatch(CamelModel):
    """Fields an employee may change on their own profile."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[AddressPatch] = None

    def to_update(self) -> EmployeeUpdate:
        sent = self.model_fields_set
        update = EmployeeUpdate(**{
            name: from_payload(sent, name, getattr(self, name))
            for name in ("first_name", "last_name", "phone_number")
        })
        if self.address is not None:
            update.address = self.address.to_update()
        return update
