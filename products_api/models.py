# products_api/models.py
from datetime import datetime

from pydantic import BaseModel


class Product(BaseModel):
    id: str
    name: str
    price: float
    category: str
    createdAt: datetime
    updatedAt: datetime


class Message(BaseModel):
    message: str


class ErrorBody(BaseModel):
    error: str
