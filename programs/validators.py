"""
Program selection validation.

Strict counterpart of ``programs.catalog``: resolves category keys to the
display values that are persisted on user records and rejects program or
specialization choices the catalog does not contain.
"""

import logging

from backend.exceptions import InvalidProgramSelection, MissingMandatoryField, UnresolvedCategory

from .catalog import ProgramCategory, find_program

logger = logging.getLogger(__name__)

ROLES_REQUIRING_CATEGORY = ('student', 'faculty')


def resolve_category_value(category):
    """
    Normalize a category to its display value.

    A display value is returned unchanged, a key is converted to its display
    value, anything else yields None.
    """
    member = ProgramCategory.lookup(category)
    return member.value if member is not None else None


def resolve_category_key(category):
    member = ProgramCategory.lookup(category)
    return member.name if member is not None else None


def validate_selection(category, program=None, specialization=None):
    """
    Validate a (category, program, specialization) triple against the catalog.

    Empty program or specialization values are accepted. Returns the
    normalized triple with the category as its display value.

    Raises:
        UnresolvedCategory: category is neither a key nor a display value
        InvalidProgramSelection: program not in the category, or
            specialization not offered by the program
    """
    category_value = resolve_category_value(category)
    if category_value is None:
        raise UnresolvedCategory(f"Unknown program category: {category!r}", category=category)

    program = program or ''
    specialization = specialization or ''

    if program:
        selected = find_program(category_value, program)
        if selected is None:
            raise InvalidProgramSelection(
                f"Program '{program}' is not offered in {category_value}",
                category=category_value,
                program=program,
            )
        if specialization and not selected.offers(specialization):
            raise InvalidProgramSelection(
                f"Specialization '{specialization}' is not offered for {program}",
                category=category_value,
                program=program,
                specialization=specialization,
            )
    elif specialization:
        raise InvalidProgramSelection(
            'A specialization requires a program',
            category=category_value,
            specialization=specialization,
        )

    return category_value, program, specialization


def validate_profile_fields(role, category=None, program=None, specialization=None, admission_year=None):
    """
    Apply the per-role mandatory field policy, then validate the selection.

    Students need a category, program, admission year and, when the chosen
    program offers any, a specialization. Faculty only need a category.
    Admins need nothing; a supplied category is still validated.

    Returns:
        dict with ``program_category``, ``program`` and ``specialization``
        ready to be stored on the user record.
    """
    if role in ROLES_REQUIRING_CATEGORY and not category:
        raise MissingMandatoryField('programCategory')

    if role == 'student':
        if not program:
            raise MissingMandatoryField('program')
        if admission_year in (None, ''):
            raise MissingMandatoryField('admissionYear')

    if not category:
        return {'program_category': None, 'program': program or None, 'specialization': specialization or None}

    category_value, program, specialization = validate_selection(category, program, specialization)

    if role == 'student' and not specialization:
        selected = find_program(category_value, program)
        if selected is not None and selected.specializations:
            raise MissingMandatoryField('specialization')

    return {
        'program_category': category_value,
        'program': program or None,
        'specialization': specialization or None,
    }
