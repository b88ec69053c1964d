"""
Stripe webhook endpoint.

POST /api/webhook/stripe

The body is passed to the reconciler untouched; signature verification
needs the exact bytes Stripe signed.
"""

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from apps.web.payments.reconciler import WebhookReconciler


@method_decorator(csrf_exempt, name="dispatch")
class StripeWebhookView(View):
    """Receives Stripe notifications. Injected with as_view(reconciler=...)."""

    http_method_names = ["post"]
    reconciler: WebhookReconciler | None = None

    def post(self, request: HttpRequest) -> JsonResponse:
        if self.reconciler is None:
            raise RuntimeError("StripeWebhookView requires a reconciler")

        result = self.reconciler.handle(
            payload=request.body,
            signature=request.headers.get("Stripe-Signature"),
        )
        return JsonResponse(result.body, status=result.status_code)
