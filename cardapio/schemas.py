"""
Pydantic Schemas for Persisted Records

Attribute names are English; every field carries the alias used in the
persisted JSON (nome, cnpj, endereco, dataCriacao...). Records are always
written with aliases so data saved by earlier versions of the app keeps
loading unchanged.

Version: 1.0.0
"""

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class UserRole(str, Enum):
    CLIENT = "cliente"
    ADMIN = "admin"


class PriceOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# BASE
# =============================================================================

class RecordModel(BaseModel):
    """Base for every persisted record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_record(self) -> dict[str, Any]:
        """Serialize with persisted field names, ready for JSON encoding."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ENTITIES
# =============================================================================

class Address(RecordModel):
    """Restaurant address, embedded in the restaurant record."""
    street: str = Field(..., alias="rua")
    number: str = Field(..., alias="numero")
    postal_code: str = Field(..., alias="cep")
    neighborhood: str = Field(..., alias="bairro")
    city: str = Field(..., alias="cidade")
    state: str = Field(..., alias="uf")
    latitude: float
    longitude: float


class User(RecordModel):
    """
    Registered account.

    The password is kept in plaintext, matching how accounts have always been
    stored on the device.
    """
    id: str
    name: str = Field(..., alias="nome")
    email: str
    password: str = Field(..., alias="senha")
    role: UserRole = Field(default=UserRole.CLIENT, alias="tipo")
    created_at: datetime = Field(..., alias="dataCriacao")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class Restaurant(RecordModel):
    id: str
    name: str = Field(..., alias="nome")
    tax_id: str = Field(..., alias="cnpj")
    address: Address = Field(..., alias="endereco")
    created_at: datetime = Field(..., alias="dataCriacao")


class Product(RecordModel):
    id: str
    name: str = Field(..., alias="nome")
    description: str = Field(..., alias="descricao")
    price: float = Field(..., alias="preco")
    image_url: str = Field(..., alias="imagem")
    restaurant_id: str = Field(..., alias="restauranteId")
    category: Optional[str] = Field(default=None, alias="categoria")
    created_at: datetime = Field(..., alias="dataCriacao")


class Session(RecordModel):
    """Single login session kept on the device."""
    user: User = Field(..., alias="usuario")
    login_at: datetime = Field(..., alias="dataLogin")
    active: bool = Field(default=True, alias="ativo")


class SessionInfo(BaseModel):
    """Read-only view of the stored session."""
    user: Optional[User] = None
    login_at: Optional[datetime] = None
    minutes_logged_in: Optional[int] = None


# =============================================================================
# PAYLOAD HELPERS
# =============================================================================

def normalize_fields(model: Type[BaseModel], data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map persisted aliases in a payload to attribute names.

    Keys that are already attribute names pass through; unknown keys are
    kept as they are. Nested record payloads (the restaurant address) are
    normalized too.

    Example:
        >>> normalize_fields(Product, {"nome": "Pizza", "preco": 10})
        {'name': 'Pizza', 'price': 10}
    """
    aliases = {
        field.alias: name
        for name, field in model.model_fields.items()
        if field.alias
    }
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = aliases.get(key, key)
        field = model.model_fields.get(name)
        annotation = field.annotation if field else None
        if (
            isinstance(value, Mapping)
            and isinstance(annotation, type)
            and issubclass(annotation, BaseModel)
        ):
            value = normalize_fields(annotation, value)
        normalized[name] = value
    return normalized
