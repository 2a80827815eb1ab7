import sqlfactories
from sqlfactories.core import sequence
from sqlfactories.factory import association, base, fields


def test_lazy_imports():
    for name in sqlfactories.__all__:
        assert getattr(sqlfactories, name) is not None


def test_lazy_imports_resolve_to_modules():
    assert sqlfactories.Factory is base.Factory
    assert sqlfactories.factory_context is base.factory_context
    assert sqlfactories.AssociationField is fields.AssociationField
    assert sqlfactories.SequenceField is fields.SequenceField
    assert sqlfactories.Existing is association.Existing
    assert sqlfactories.Pending is association.Pending
    assert sqlfactories.Sequence is sequence.Sequence
    assert sqlfactories.sequence is sequence.sequence
