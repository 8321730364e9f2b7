"""
University program catalog.

Static, hierarchical reference data: category -> programs -> specializations.
Lookups accept a category key (``ENGINEERING``) or its display value
(``Engineering & Technology``) interchangeably and degrade to empty results
on unknown input, so they can back UI filters directly. Strict checking lives
in ``programs.validators``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from django.db import models


class ProgramCategory(models.TextChoices):
    """Program categories; ``name`` is the internal key, ``value`` the stored display value"""
    ENGINEERING = 'Engineering & Technology', 'Engineering & Technology'
    COMPUTER_APP = 'Computer Applications', 'Computer Applications'
    SCIENCE = 'Science', 'Science'
    AGRICULTURE = 'Agriculture & Fisheries', 'Agriculture & Fisheries'
    HEALTH = 'Health Sciences & Pharmacy', 'Health Sciences & Pharmacy'
    NURSING = 'Nursing', 'Nursing'
    MARITIME = 'Maritime Studies', 'Maritime Studies'
    MANAGEMENT = 'Management, Commerce & Law', 'Management, Commerce & Law'
    HOSPITALITY = 'Hospitality & Culinary Arts', 'Hospitality & Culinary Arts'
    PHD = 'Ph.D. Programs', 'Ph.D. Programs'

    @property
    def key(self):
        return self.name

    @property
    def display_value(self):
        return self.value

    @classmethod
    def lookup(cls, key_or_value) -> Optional['ProgramCategory']:
        """Return the member matching a display value or a key, else None"""
        if isinstance(key_or_value, cls):
            return key_or_value
        if not isinstance(key_or_value, str):
            return None
        if key_or_value in cls.values:
            return cls(key_or_value)
        return cls.__members__.get(key_or_value)


@dataclass(frozen=True)
class Program:
    degree: str
    name: str
    duration: str
    has_lateral_entry: bool = False
    specializations: Tuple[str, ...] = field(default_factory=tuple)

    def offers(self, specialization):
        return specialization in self.specializations

    def as_dict(self):
        return {
            'degree': self.degree,
            'name': self.name,
            'duration': self.duration,
            'hasLateralEntry': self.has_lateral_entry,
            'specializations': list(self.specializations),
        }


UNIVERSITY_PROGRAMS: Dict[ProgramCategory, Tuple[Program, ...]] = {
    ProgramCategory.ENGINEERING: (
        Program('B.Tech', 'Bachelor of Technology', '4 years', True, (
            'Robotics & Automation',
            'Computer Science & Engineering',
            'CSE - Cyber Security',
            'CSE - Data Science',
            'CSE - Artificial Intelligence & Machine Learning',
            'Marine Engineering',
        )),
        Program('M.Tech', 'Master of Technology', '2 years', False, (
            'Computer Science & Engineering (Data Science)',
            'Artificial Intelligence & Machine Learning',
        )),
    ),
    ProgramCategory.COMPUTER_APP: (
        Program('BCA', 'Bachelor of Computer Applications', '3 years'),
        Program('MCA', 'Master of Computer Applications', '2 years'),
    ),
    ProgramCategory.SCIENCE: (
        Program('B.Sc (Hons.)', 'Bachelor of Science (Honours)', '3 years', False, (
            'Biotechnology',
            'Microbiology',
            'Applied Psychology',
        )),
        Program('M.Sc', 'Master of Science', '2 years', False, (
            'Biotechnology',
            'Microbiology',
            'Applied Psychology',
            'Physics',
            'Chemistry',
            'Mathematics',
        )),
    ),
    ProgramCategory.AGRICULTURE: (
        Program('B.Sc (Hons.) Agriculture', 'Bachelor of Science (Honours) in Agriculture', '4 years'),
        Program('B.F.Sc', 'Bachelor of Fisheries Science', '4 years'),
        Program('M.Sc Agriculture', 'Master of Science in Agriculture', '2 years', False, (
            'Agronomy',
            'Soil Science',
            'Horticulture',
            'Plant Pathology',
            'Agricultural Economics',
        )),
    ),
    ProgramCategory.HEALTH: (
        Program('B.Pharm', 'Bachelor of Pharmacy', '4 years'),
        Program('D.Pharm', 'Diploma in Pharmacy', '2 years'),
        Program('M.Pharm', 'Master of Pharmacy', '2 years', False, (
            'Pharmaceutics',
            'Pharmacology',
            'Pharmaceutical Chemistry',
            'Pharmacognosy',
        )),
        Program('BPT', 'Bachelor of Physiotherapy', '4.5 years'),
        Program('B.Optom', 'Bachelor of Optometry', '4 years'),
        Program('M.Optom', 'Master of Optometry', '2 years'),
        Program('BMLT', 'Bachelor of Medical Laboratory Technology', '3 years'),
        Program('BMRIT', 'Bachelor of Medical Radiology & Imaging Technology', '3 years'),
        Program('B.Sc OTT', 'B.Sc in Operation Theatre Technology', '3 years'),
        Program('B.Sc CCT', 'B.Sc in Critical Care Technology', '3 years'),
    ),
    ProgramCategory.NURSING: (
        Program('B.Sc Nursing', 'Bachelor of Science in Nursing', '4 years'),
        Program('GNM', 'General Nursing & Midwifery', '3 years'),
    ),
    ProgramCategory.MARITIME: (
        Program('B.Sc Nautical Science', 'Bachelor of Science in Nautical Science', '3 years'),
        Program('DNS', 'Diploma in Nautical Science', '1 year'),
    ),
    ProgramCategory.MANAGEMENT: (
        Program('BBA (Hons.)', 'Bachelor of Business Administration (Honours)', '3 years', False, (
            'Digital Marketing',
            'Logistics & Supply Chain',
            'Finance',
            'International Business',
            'Human Resource Management',
        )),
        Program('MBA', 'Master of Business Administration', '2 years', False, (
            'Marketing',
            'Finance',
            'Human Resources',
            'Agri-Business',
            'Operations Management',
            'Information Technology',
        )),
        Program('B.Com (Hons.)', 'Bachelor of Commerce (Honours)', '3 years', False, (
            'Taxation',
            'E-Commerce',
            'Banking & Finance',
            'Accounting',
        )),
        Program('B.A. LL.B (Hons.)', 'Bachelor of Arts & Bachelor of Laws (Integrated)', '5 years'),
        Program('B.B.A. LL.B (Hons.)', 'Bachelor of Business Administration & Bachelor of Laws (Integrated)', '5 years'),
    ),
    ProgramCategory.HOSPITALITY: (
        Program('B.Sc HHA', 'B.Sc in Hospitality & Hotel Administration', '3 years', False, (
            'With Swiss Diploma',
            'Regular',
        )),
        Program('B.Sc Culinary Arts', 'B.Sc in Culinary Arts', '3 years'),
        Program('MHM', 'Master in Hospital Management', '2 years'),
    ),
    ProgramCategory.PHD: (
        Program('Ph.D.', 'Doctor of Philosophy', 'Variable', False, (
            'Engineering',
            'Science',
            'Humanities',
            'Pharmacy',
            'Agriculture',
            'Management',
            'Computer Applications',
        )),
    ),
}


def categories() -> List[Tuple[str, str]]:
    """Ordered (key, display value) pairs for every category"""
    return [(category.name, category.value) for category in ProgramCategory]


def programs_for(category) -> List[Program]:
    """Programs of a category given by key or display value; [] when unknown"""
    member = ProgramCategory.lookup(category)
    if member is None:
        return []
    return list(UNIVERSITY_PROGRAMS.get(member, ()))


def find_program(category, degree) -> Optional[Program]:
    for program in programs_for(category):
        if program.degree == degree:
            return program
    return None


def specializations_for(category, degree) -> List[str]:
    """Specializations of a program; [] when the category or program is unknown"""
    program = find_program(category, degree)
    return list(program.specializations) if program else []


def format_program_display(degree, specialization=None):
    if not degree:
        return ''
    if specialization:
        return f"{degree} - {specialization}"
    return degree
