import json
import logging
from functools import wraps

from django.http import Http404, JsonResponse
from django.shortcuts import render
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from blockchain.exceptions import (
    DuplicateRegistration, InvalidInput, NotFound, StorageUnavailable
)
from blockchain.utils import format_timestamp

from .services import product_service

logger = logging.getLogger(__name__)

FEATURES = ['Hash Chaining', 'Tamper Detection', 'Cryptographic Verification']


def api_errors(view):
    """Traduz os erros do domínio em respostas JSON com o status HTTP adequado."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except InvalidInput as exc:
            return JsonResponse({'success': False, 'error': exc.message, 'errors': exc.errors}, status=400)
        except NotFound:
            return JsonResponse({'success': False, 'error': 'Product not found'}, status=404)
        except DuplicateRegistration as exc:
            return JsonResponse({
                'success': False,
                'error': 'Product already synced',
                'consumerProductId': exc.product_id,
            }, status=409)
        except StorageUnavailable as exc:
            return JsonResponse({'success': False, 'error': 'Storage unavailable', 'details': str(exc)}, status=503)
    return wrapper


# ----------------------------------------------------------------------
# 1. SYNC (Distribuidor -> Consumidor)
# ----------------------------------------------------------------------

@csrf_exempt
@require_POST
@api_errors
def sync_product(request):
    try:
        payload = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        raise InvalidInput("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise InvalidInput("Request body must be a JSON object")

    logger.info("Sync request received: distributor=%s name=%s origin=%s status=%s",
                payload.get('distributorProductId'), payload.get('name'),
                payload.get('origin'), payload.get('status'))

    product, verification = product_service.register_from_payload(payload)

    return JsonResponse({
        'success': True,
        'consumerProductId': product.id,
        'product': product.to_dict(),
        'hashChainVerified': verification.valid,
    })


# ----------------------------------------------------------------------
# 2. LEITURA, LISTAGEM E REMOÇÃO
# ----------------------------------------------------------------------

@require_GET
@api_errors
def list_products(request):
    products = product_service.list_products()
    return JsonResponse({'success': True, 'count': len(products), 'products': products})


@csrf_exempt
@require_http_methods(['GET', 'DELETE'])
@api_errors
def product_detail(request, product_id):
    """GET = scan do QR (conta a leitura); DELETE = remove o produto."""
    if request.method == 'DELETE':
        deleted = product_service.delete(product_id)
        return JsonResponse({'success': True, 'message': 'Product deleted successfully', **deleted})

    return JsonResponse({'success': True, **product_service.scan(product_id)})


@require_GET
@api_errors
def verify_product(request, product_id):
    return JsonResponse({'success': True, **product_service.verify(product_id)})


# ----------------------------------------------------------------------
# 3. PÁGINA PÚBLICA (QR) E HEALTH
# ----------------------------------------------------------------------

@require_GET
def product_page(request, product_id):
    try:
        product, analysis, verification = product_service.inspect(product_id)
    except NotFound:
        raise Http404("Invalid Product ID")

    return render(request, 'products/product_page.html', {
        'product': product,
        'analysis': analysis,
        'verification': verification,
        'is_retail': analysis['status'] == 'Authentic',
        'scanned_at': timezone.now(),
    })


@require_GET
@api_errors
def health(request):
    return JsonResponse({
        'status': 'healthy',
        'productsCount': product_service.count(),
        'time': format_timestamp(timezone.now()),
        'features': FEATURES,
    })
