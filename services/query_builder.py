# services/query_builder.py
"""
Per-listing-type match predicates.

Every predicate is a case-insensitive substring match of the literal term;
LIKE wildcards in the term are escaped so "50%" only matches "50%".
"""
from sqlalchemy import or_, and_, exists, select, column, String
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

from models.Homestays import Homestay, HomestayStatus
from models.Guides import Guide
from models.Products import Product


class json_array_elements(FunctionElement):
    """Table-valued function yielding each element of a JSON array as text."""
    name = "json_array_elements"
    inherit_cache = True


@compiles(json_array_elements)
def _json_each(element, compiler, **kw):
    return "json_each(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_array_elements, "postgresql")
def _jsonb_array_elements_text(element, compiler, **kw):
    return "jsonb_array_elements_text(%s)" % compiler.process(element.clauses, **kw)


def contains(column, term: str):
    return column.icontains(term, autoescape=True)


def any_element_contains(array_column, term: str):
    """Match inside the array elements, not the serialized JSON (which escapes non-ASCII)."""
    elements = json_array_elements(array_column).table_valued(column("value", String))
    return exists(select(1).select_from(elements).where(contains(elements.c.value, term)))


def homestay_filter(term: str):
    return and_(
        Homestay.status == HomestayStatus.ACTIVE,
        or_(
            contains(Homestay.title, term),
            contains(Homestay.description, term),
            contains(Homestay.district, term),
            contains(Homestay.address, term),
        ),
    )


def guide_filter(term: str):
    return or_(
        contains(Guide.name, term),
        contains(Guide.bio, term),
        any_element_contains(Guide.specializations, term),
        contains(Guide.district, term),
    )


def product_filter(term: str):
    return or_(
        contains(Product.title, term),
        contains(Product.description, term),
        contains(Product.category, term),
    )


# Autocomplete only looks at the display label of each listing

def homestay_title_filter(term: str):
    return and_(Homestay.status == HomestayStatus.ACTIVE, contains(Homestay.title, term))


def guide_name_filter(term: str):
    return contains(Guide.name, term)


def product_title_filter(term: str):
    return contains(Product.title, term)


def district_filter(term: str):
    return contains(Homestay.district, term)
