import pytest

import sqlfactories
from sqlfactories import Factory, factory_context, monkay
from sqlfactories.conf import settings
from sqlfactories.conf.global_settings import FactorySettings
from sqlfactories.exceptions import FactoryRecursionError
from tests.schema import City, CityFactory, Country, CountryFactory, StreetFactory, cities
from tests.settings import TestSettings


def test_settings_module_from_environment():
    assert isinstance(monkay.settings, TestSettings)
    assert settings.faker_seed == 1234
    assert sqlfactories.settings.factory_validation == "error"


def test_defaults():
    defaults = FactorySettings()

    assert defaults.id_field == "id"
    assert defaults.association_column_suffix == "_id"
    assert defaults.use_returning is True
    assert defaults.sequence_start == 0
    assert defaults.max_association_depth == 32
    assert defaults.factory_validation == "warn"


def test_id_field_setting():
    country = Country(id=1, name="Denmark")

    with monkay.with_settings(monkay.settings.model_copy(update={"id_field": "name"})):
        assert CountryFactory.id_for_model(country) == "Denmark"

    assert CountryFactory.id_for_model(country) == 1


def test_association_column_suffix_setting():
    field = CityFactory.meta.fields["country"]

    with monkay.with_settings(
        monkay.settings.model_copy(update={"association_column_suffix": "_ref"})
    ):
        assert field.get_column() == "country_ref"

    assert field.get_column() == "country_id"


def test_max_association_depth_setting():
    with monkay.with_settings(monkay.settings.model_copy(update={"max_association_depth": 1})):
        assert CityFactory()["country"].factory["name"] == "Denmark"
        with pytest.raises(FactoryRecursionError):
            StreetFactory()


def test_max_association_depth_inside_factory_context():
    with monkay.with_settings(monkay.settings.model_copy(update={"max_association_depth": 1})):
        with factory_context():
            assert CityFactory()["country"].factory["name"] == "Denmark"
            with pytest.raises(FactoryRecursionError):
                StreetFactory()


def test_factory_validation_setting():
    with monkay.with_settings(monkay.settings.model_copy(update={"factory_validation": "none"})):

        class CityFactory1(Factory):
            class Meta:
                model = City
                table = cities

    assert "name" not in CityFactory1.meta.fields
