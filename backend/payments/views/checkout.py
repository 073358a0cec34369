import logging

from django.conf import settings
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ..factories import get_checkout_service
from ..serializers import CheckoutRequestSerializer, CheckoutResponseSerializer

logger = logging.getLogger(__name__)


@method_decorator(
    ratelimit(key='ip', rate=lambda group, request: settings.CHECKOUT_RATE_LIMIT, method='POST', block=True),
    name='post',
)
class CheckoutView(APIView):
    """
    Public checkout: price the cart, create the order and return the hosted
    payment page URL. Domain errors are rendered by the project exception
    handler.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = get_checkout_service().initiate_checkout(
            data['restaurant'],
            data.get('table') or None,
            [dict(line) for line in data['items']],
            tip_rate_bps=data.get('tip_rate_bps'),
            notes=data.get('notes'),
        )
        return Response(CheckoutResponseSerializer(result).data, status=status.HTTP_201_CREATED)
