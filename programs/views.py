from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .catalog import categories, format_program_display, programs_for, specializations_for
from .validators import resolve_category_value


@api_view(['GET'])
@permission_classes([AllowAny])
def list_categories(request):
    """Get all program categories as key/value pairs"""
    data = [{'key': key, 'value': value} for key, value in categories()]
    return Response({
        'success': True,
        'count': len(data),
        'data': data
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def list_programs(request):
    """Get the programs of a category (key or display value)"""
    category = request.query_params.get('category', '')
    programs = programs_for(category)
    return Response({
        'success': True,
        'category': resolve_category_value(category),
        'count': len(programs),
        'data': [program.as_dict() for program in programs]
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def list_specializations(request):
    """Get the specializations offered by a program"""
    category = request.query_params.get('category', '')
    degree = request.query_params.get('program', '')
    specializations = specializations_for(category, degree)
    return Response({
        'success': True,
        'count': len(specializations),
        'data': [
            {'name': name, 'display': format_program_display(degree, name)}
            for name in specializations
        ]
    })
