"""Django views for the semantic discussions app.

The discussion API is a single JSON endpoint dispatching on the
``submodule`` parameter. Write modules only accept POST requests.
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .api import MODULES, execute_module
from .exceptions import ApiUsageError, SemanticDiscussionsError
from .forms import SignUpForm

logger = logging.getLogger(__name__)


def _error(code: str, info: str, status: int) -> JsonResponse:
    return JsonResponse({'error': {'code': code, 'info': info}}, status=status)


@csrf_exempt
def api(request: HttpRequest) -> HttpResponse:
    """Execute one discussion API module and return its result as JSON."""

    params = request.POST if request.method == 'POST' else request.GET
    name = params.get('submodule', '')
    module_class = MODULES.get(name)
    if module_class is None:
        return _error('unknown-submodule', f'Unrecognized submodule "{name}".', 400)
    if module_class.write_mode and request.method != 'POST':
        return _error('mustbeposted', f'The "{name}" module requires a POST request.', 405)

    user = request.user.get_username() if request.user.is_authenticated else ''
    module = module_class(params, user=user)
    try:
        result = execute_module(module)
    except ApiUsageError as exc:
        return _error(exc.code, exc.info, 400)
    except SemanticDiscussionsError as exc:
        logger.error('Discussion API %s failed: %s', name, exc)
        return _error('internal-error', str(exc), 500)
    return JsonResponse({name: result})


@csrf_exempt
@require_POST
def signup(request: HttpRequest) -> HttpResponse:
    """Create an account unless the requested name is reserved."""

    form = SignUpForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'errors': form.errors.get_json_data()}, status=400)
    user = form.save()
    return JsonResponse({'username': user.get_username()}, status=201)
