"""
Registration form models.

Pydantic models validating the text submitted through the two modal
forms before it reaches the domain.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from src.domain.ports import AddressInfo, ContactInfo


class ContactForm(BaseModel):
    """Step 1: who is selling."""

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(..., min_length=2, max_length=100, title="Full name")
    company: str = Field(..., min_length=1, max_length=100, title="Company")
    tax_id: str = Field(..., min_length=2, max_length=50, title="Tax / VAT ID")
    email: EmailStr = Field(..., title="E-mail")

    def to_contact(self) -> ContactInfo:
        return ContactInfo(
            full_name=self.full_name,
            company=self.company,
            tax_id=self.tax_id,
            email=str(self.email),
        )


class AddressForm(BaseModel):
    """Step 2: where the seller lives and how they get paid."""

    model_config = ConfigDict(str_strip_whitespace=True)

    address_line_1: str = Field(..., min_length=3, max_length=150, title="Address line 1")
    address_line_2: str = Field("", max_length=150, title="Address line 2")
    postal_code: str = Field(..., min_length=2, max_length=12, title="Postal code")
    city: str = Field(..., min_length=2, max_length=100, title="City")
    payout_details: str = Field(..., min_length=5, max_length=200, title="Payout details")

    def to_address(self) -> AddressInfo:
        return AddressInfo(
            address_line_1=self.address_line_1,
            address_line_2=self.address_line_2,
            postal_code=self.postal_code,
            city=self.city,
            payout_details=self.payout_details,
        )


def invalid_field_titles(model: type[BaseModel], error: ValidationError) -> list[str]:
    """Human-readable titles of the fields that failed validation, in form order."""
    failed = {str(err["loc"][0]) for err in error.errors() if err.get("loc")}
    return [
        info.title or name
        for name, info in model.model_fields.items()
        if name in failed
    ]
