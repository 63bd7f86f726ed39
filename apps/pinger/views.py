import json

from django.http import HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from . import keepalive
from .services import (
    AlreadyRunning,
    AlreadyStopped,
    DuplicateTarget,
    InvalidTarget,
    ReloadFailed,
    Target,
    TargetNotFound,
)
from .services.log_buffer import DEFAULT_TAIL

DASHBOARD_LOG_TAIL = 50


def text_response(message, status=200):
    return HttpResponse(message, status=status, content_type='text/plain; charset=utf-8')


def parse_json_body(request):
    """Decode a JSON object body, or return None if it isn't one."""
    try:
        data = json.loads(request.body or b'')
    except (ValueError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


@require_GET
def health(request):
    """Health check endpoint so the service can keep itself awake too."""
    return JsonResponse({'status': 'ok'})


@require_GET
def dashboard(request):
    """HTML overview of the scheduler with controls."""
    scheduler = keepalive.get_scheduler()
    context = {
        'status': scheduler.status(),
        'targets': scheduler.list_targets(),
        'logs': scheduler.tail_logs(DASHBOARD_LOG_TAIL),
        'active_loops': scheduler.active_loops(),
    }
    return render(request, 'pinger/dashboard.html', context)


@require_GET
def status(request):
    return JsonResponse(keepalive.get_scheduler().status())


@csrf_exempt
@require_POST
def start(request):
    try:
        keepalive.get_scheduler().start()
    except AlreadyRunning:
        return text_response("Already running", status=400)
    return text_response("Started pinging")


@csrf_exempt
@require_POST
def stop(request):
    try:
        keepalive.get_scheduler().stop()
    except AlreadyStopped:
        return text_response("Already stopped", status=400)
    return text_response("Stopped pinging")


@require_GET
def targets(request):
    data = [t.to_dict() for t in keepalive.get_scheduler().list_targets()]
    return JsonResponse(data, safe=False)


@csrf_exempt
@require_POST
def add_target(request):
    data = parse_json_body(request)
    if data is None:
        return text_response("Request body must be a JSON object", status=400)

    try:
        target = Target.from_dict(data)
    except InvalidTarget as e:
        return text_response(str(e), status=400)

    try:
        keepalive.get_scheduler().add_target(target)
    except DuplicateTarget:
        return text_response("Target already exists", status=400)
    return text_response("Target added")


@csrf_exempt
@require_POST
def remove_target(request):
    data = parse_json_body(request)
    url = data.get('url') if data else None
    if not isinstance(url, str):
        return text_response("Request body must be a JSON object with a url", status=400)

    try:
        keepalive.get_scheduler().remove_target(url)
    except TargetNotFound:
        return text_response("Target not found", status=404)
    return text_response("Target removed")


@require_GET
def logs(request):
    tail = request.GET.get('tail')
    if tail is None:
        n = DEFAULT_TAIL
    else:
        try:
            n = int(tail)
        except ValueError:
            return text_response("tail must be an integer", status=400)
    return JsonResponse(keepalive.get_scheduler().tail_logs(n), safe=False)


@csrf_exempt
@require_POST
def reload(request):
    try:
        keepalive.get_scheduler().reload()
    except ReloadFailed as e:
        return text_response(f"Failed to reload targets: {e.reason}", status=500)
    return text_response("Targets reloaded")
