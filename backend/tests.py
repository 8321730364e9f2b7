from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from rest_framework import status
from rest_framework.exceptions import NotFound

from .exceptions import (
    AlreadyReviewed,
    CreditsNotAllowed,
    InvalidProgramSelection,
    MissingMandatoryField,
    OutOfScope,
    UnresolvedCategory,
    api_exception_handler,
    status_for,
)


class HealthCheckTests(TestCase):
    """Test the deployment health check"""

    def test_healthy(self):
        response = self.client.get('/api/health/')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['status'], 'healthy')
        self.assertEqual(body['database'], 'ok')
        self.assertEqual(body['version'], '1.0.0')

    def test_degraded_when_database_unreachable(self):
        with mock.patch('backend.health_views.connection') as connection:
            connection.cursor.side_effect = DatabaseError('connection refused')
            response = self.client.get('/api/health/')
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['status'], 'degraded')

    def test_get_only(self):
        response = self.client.post('/api/health/')
        self.assertEqual(response.status_code, 405)


class ExceptionHandlerTests(SimpleTestCase):
    """Test mapping of domain errors to HTTP responses"""

    def test_status_mapping(self):
        self.assertEqual(status_for(InvalidProgramSelection()), status.HTTP_400_BAD_REQUEST)
        self.assertEqual(status_for(UnresolvedCategory()), status.HTTP_400_BAD_REQUEST)
        self.assertEqual(status_for(MissingMandatoryField('program')), status.HTTP_400_BAD_REQUEST)
        self.assertEqual(status_for(CreditsNotAllowed()), status.HTTP_400_BAD_REQUEST)
        self.assertEqual(status_for(OutOfScope()), status.HTTP_403_FORBIDDEN)
        self.assertEqual(status_for(AlreadyReviewed()), status.HTTP_409_CONFLICT)

    def test_payload(self):
        response = api_exception_handler(MissingMandatoryField('admissionYear'), {'view': None})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'success': False,
            'message': 'admissionYear is required',
            'code': 'missing_mandatory_field',
            'details': {'field': 'admissionYear'},
        })

    def test_default_message_without_details(self):
        response = api_exception_handler(AlreadyReviewed(), {})
        self.assertEqual(response.data['message'], 'Activity has already been reviewed')
        self.assertNotIn('details', response.data)

    def test_framework_errors_use_default_handler(self):
        response = api_exception_handler(NotFound(), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('detail', response.data)

    def test_unrelated_exceptions_are_not_handled(self):
        self.assertIsNone(api_exception_handler(RuntimeError('boom'), {}))
