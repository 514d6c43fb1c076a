"""
Custom pagination classes
"""
from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination with 20 bookings per page
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100
