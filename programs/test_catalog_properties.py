"""
Property-based tests for the program catalog and selection validator.

Properties:
- key and display value resolve to each other for every category
- every catalog triple validates and round-trips to the display value
- lookups never raise, whatever string they are given
"""

from hypothesis import given, strategies as st

from backend.exceptions import InvalidProgramSelection, UnresolvedCategory

from .catalog import UNIVERSITY_PROGRAMS, ProgramCategory, categories, programs_for, specializations_for
from .validators import resolve_category_key, resolve_category_value, validate_selection

category_members = st.sampled_from(list(ProgramCategory))

catalog_triples = st.sampled_from([
    (category, program.degree, specialization)
    for category, programs in UNIVERSITY_PROGRAMS.items()
    for program in programs
    for specialization in (program.specializations or ('',))
])

unknown_text = st.text(max_size=40).filter(lambda s: ProgramCategory.lookup(s) is None)


class TestCategoryDuality:

    @given(member=category_members)
    def test_key_and_value_resolve_to_each_other(self, member):
        assert resolve_category_value(member.name) == member.value
        assert resolve_category_value(member.value) == member.value
        assert resolve_category_key(member.value) == member.name
        assert resolve_category_key(resolve_category_value(member.name)) == member.name

    @given(member=category_members)
    def test_programs_identical_for_key_and_value(self, member):
        assert programs_for(member.name) == programs_for(member.value)
        assert programs_for(member.name)

    def test_categories_bijective(self):
        pairs = categories()
        assert len(dict(pairs)) == len(pairs)
        assert len({value for _, value in pairs}) == len(pairs)


class TestSelectionValidation:

    @given(triple=catalog_triples, use_key=st.booleans())
    def test_catalog_triples_validate(self, triple, use_key):
        category, degree, specialization = triple
        given_category = category.name if use_key else category.value
        result = validate_selection(given_category, degree, specialization)
        assert result == (category.value, degree, specialization)

    @given(text=unknown_text, degree=st.text(max_size=20))
    def test_unknown_category_always_rejected(self, text, degree):
        try:
            validate_selection(text, degree)
        except UnresolvedCategory:
            pass
        else:
            raise AssertionError(f"{text!r} was accepted as a category")

    @given(member=category_members, degree=st.text(min_size=1, max_size=30))
    def test_program_must_belong_to_category(self, member, degree):
        known = {program.degree for program in programs_for(member)}
        try:
            validate_selection(member.value, degree)
        except InvalidProgramSelection:
            assert degree not in known
        else:
            assert degree in known


class TestLookupsNeverRaise:

    @given(category=st.one_of(st.none(), st.text(max_size=40), st.integers()), degree=st.text(max_size=30))
    def test_lookups_degrade_to_empty(self, category, degree):
        assert isinstance(programs_for(category), list)
        assert isinstance(specializations_for(category, degree), list)
        resolve_category_value(category)
        resolve_category_key(category)
