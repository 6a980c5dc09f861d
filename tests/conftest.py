"""Shared fixtures for the catalog discovery tests."""
import pytest

from models import Comment, Product
from tools.storage import MemoryStorage, PersistentStore


def make_product(name: str, type: str = "", **extra) -> Product:
    fields = {
        "name": name,
        "description": f"{name} description",
        "price": "$100",
        "link": f"https://shop.example.com/{name.lower().replace(' ', '-')}",
        "image": f"https://shop.example.com/img/{name.lower().replace(' ', '-')}.jpg",
        "type": type,
    }
    fields.update(extra)
    return Product(**fields)


def make_comment(product_type: str, text: str, author: str = "Guest") -> Comment:
    return Comment(product_type=product_type, author=author, text=text, date="2024-01-01")


@pytest.fixture
def backend():
    return MemoryStorage()


@pytest.fixture
def store(backend):
    return PersistentStore(backend)


@pytest.fixture
def catalog():
    return [
        make_product("Electro Max", "e-bike"),
        make_product("Trail Runner", "e-bike"),
        make_product("Urban Glide", "scooter"),
        make_product("Shield Helmet", "helmet"),
        make_product("Power Pack", ""),
    ]
