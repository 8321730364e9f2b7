from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class ListPagination(PageNumberPagination):
    """
    page/limit pagination answering with
    ``{<results_key>: [...], 'pagination': {total, page, pages, hasMore}}``.
    """
    page_size = 10
    page_query_param = 'page'
    page_size_query_param = 'limit'
    max_page_size = 100
    results_key = 'results'

    def __init__(self, results_key=None):
        if results_key:
            self.results_key = results_key

    def get_pagination_meta(self):
        paginator = self.page.paginator
        page_number = self.page.number
        return {
            'total': paginator.count,
            'page': page_number,
            'pages': paginator.num_pages if paginator.count else 0,
            'hasMore': self.page.has_next(),
        }

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            self.results_key: data,
            'pagination': self.get_pagination_meta(),
        })


def paginate(request, queryset, serializer_class, results_key, view=None, context=None):
    """Paginate ``queryset`` and build the list response in one go"""
    paginator = ListPagination(results_key=results_key)
    page = paginator.paginate_queryset(queryset, request, view=view)
    serializer = serializer_class(page, many=True, context=context or {'request': request})
    return paginator.get_paginated_response(serializer.data)
