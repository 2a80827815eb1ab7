import pytest
import sqlalchemy

from sqlfactories import AssociationField, Factory, FactoryField
from sqlfactories.exceptions import (
    FactoryDefinitionError,
    FactoryRecursionError,
    InvalidModelError,
)
from sqlfactories.factory import metaclasses
from tests.schema import City, Country, CountryFactory, cities, countries, metadata

nodes = sqlalchemy.Table(
    "nodes",
    sqlalchemy.MetaData(),
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("parent_id", sqlalchemy.Integer, nullable=False),
)


class Node:
    def __init__(self, id, parent_id):
        self.id = id
        self.parent_id = parent_id


class NodeFactory(Factory):
    class Meta:
        model = Node
        table = nodes

    # required self reference, can never be built
    parent = AssociationField("tests.factory.test_factory_errors.NodeFactory")


class NotAModel: ...


def test_no_model_fails():
    with pytest.raises(InvalidModelError):

        class CountryFactory1(Factory):
            class Meta:
                table = countries

    with pytest.raises(InvalidModelError):

        class CountryFactory2(Factory):
            pass


def test_no_table_fails():
    with pytest.raises(InvalidModelError):

        class CountryFactory1(Factory):
            class Meta:
                model = Country


def test_invalid_model_fails():
    with pytest.raises(InvalidModelError):

        class CountryFactory1(Factory):
            class Meta:
                model = NotAModel()
                table = countries


def test_invalid_table_fails():
    with pytest.raises(InvalidModelError):

        class CountryFactory1(Factory):
            class Meta:
                model = Country
                table = "tests.schema.metadata"


def test_model_and_table_by_string():
    class CountryFactory1(Factory):
        class Meta:
            model = "tests.schema.Country"
            table = "tests.schema.countries"

        name = "Denmark"

    assert CountryFactory1.meta.model is Country
    assert CountryFactory1()["name"] == "Denmark"
    assert CountryFactory1.meta.table is metadata.tables["countries"]


def test_invalid_model_string_fails():
    with pytest.raises(ModuleNotFoundError):

        class CountryFactory1(Factory):
            class Meta:
                model = "tests.not_there.Country"
                table = countries


def test_field_without_column_fails():
    with pytest.raises(FactoryDefinitionError):

        class CountryFactory1(CountryFactory):
            population = FactoryField(default=5)

    with pytest.raises(FactoryDefinitionError):

        class CityFactory1(Factory):
            class Meta:
                model = City
                table = cities

            name = "Aalborg"
            land = AssociationField(CountryFactory)


def test_field_name_clashing_with_api_fails():
    with pytest.raises(FactoryDefinitionError):

        class CountryFactory1(CountryFactory):
            insert = FactoryField(default="x", column="name")

    with pytest.raises(FactoryDefinitionError):

        class CountryFactory2(CountryFactory):
            values = FactoryField(default="x", column="name")


def test_uncovered_column_fails_with_error_validation():
    with pytest.raises(FactoryDefinitionError):

        class CityFactory1(Factory, validation="error"):
            class Meta:
                model = City
                table = cities

            name = "Aalborg"


def test_uncovered_column_warns(monkeypatch):
    warnings = []
    monkeypatch.setattr(metaclasses.terminal, "write_warning", warnings.append)

    class CityFactory1(Factory, validation="warn"):
        class Meta:
            model = City
            table = cities

        name = "Aalborg"

    assert len(warnings) == 1
    assert "country_id" in warnings[0]
    assert CityFactory1()["name"] == "Aalborg"


def test_uncovered_column_without_validation(monkeypatch):
    warnings = []
    monkeypatch.setattr(metaclasses.terminal, "write_warning", warnings.append)

    class CityFactory1(Factory, validation="none"):
        class Meta:
            model = City
            table = cities

    assert warnings == []


def test_uncovered_column_insert_propagates_database_error(connection):
    class CityFactory1(Factory, validation="none"):
        class Meta:
            model = City
            table = cities

        name = "Aalborg"

    with pytest.raises(sqlalchemy.exc.IntegrityError):
        CityFactory1().insert(connection)


def test_abstract_factory_cannot_be_instantiated():
    class BaseFactory(Factory):
        class Meta:
            abstract = True

    with pytest.raises(InvalidModelError):
        BaseFactory()

    with pytest.raises(InvalidModelError):
        Factory()


def test_association_to_non_factory_fails():
    class CityFactory1(Factory):
        class Meta:
            model = City
            table = cities

        name = "Aalborg"
        country = AssociationField("tests.schema.Country")

    with pytest.raises(FactoryDefinitionError):
        CityFactory1()


def test_required_self_reference_fails():
    with pytest.raises(FactoryRecursionError):
        NodeFactory()


def test_field_without_default_fails():
    class CountryFactory1(CountryFactory):
        name = FactoryField()

    with pytest.raises(FactoryDefinitionError):
        CountryFactory1()

    assert CountryFactory1(name="Chile")["name"] == "Chile"
