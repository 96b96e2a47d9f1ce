"""Django views for the linkweaver app.

The app exposes the injection engine over HTTP: one endpoint runs a full
injection for a posted article, another scores a single anchor phrase.
Both answer with JSON.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .engine import ConfigError, StructuralError, validate_anchor
from .forms import InjectionForm
from .services import run_injection

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def inject(request: HttpRequest) -> JsonResponse:
    """Inject links into the posted article and return the engine report."""

    form = InjectionForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'errors': form.errors.get_json_data()}, status=400)

    try:
        outcome = run_injection(
            form.cleaned_data['content'],
            form.cleaned_data['targets'],
            is_html=form.cleaned_data['is_html_input'],
            strip_links=form.cleaned_data['strip_existing_links'],
            current_url=form.cleaned_data['current_url'],
            config_path=getattr(settings, 'LINKWEAVER_CONFIG_PATH', None),
            overrides=form.overrides(),
        )
    except ConfigError as exc:
        return JsonResponse({'errors': {'config': [{'message': str(exc)}]}}, status=400)
    except StructuralError as exc:
        logger.warning('Rejected document: %s', exc)
        return JsonResponse({'errors': {'content': [{'message': str(exc)}]}}, status=422)

    if not outcome.text_preserved:
        logger.error('Injection altered the document text')
    return JsonResponse(outcome.to_dict())


@require_GET
def anchor_validation(request: HttpRequest) -> JsonResponse:
    """Score ``?phrase=`` as anchor text, optionally against ``?title=``."""

    phrase = request.GET.get('phrase', '')
    title = request.GET.get('title') or None
    return JsonResponse(asdict(validate_anchor(phrase, title)))
