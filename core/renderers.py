"""
Core — Response Renderer

Successful responses go out as { "success": true, "data": ..., "meta": ... }.
Paginated listings put `results` under data and the page position under
meta. Error responses are already enveloped by the exception handler.

@file core/renderers.py
"""

from rest_framework.renderers import JSONRenderer


class StandardJSONRenderer(JSONRenderer):

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        if response is not None and (response.status_code >= 400 or response.status_code == 204):
            return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and 'success' in data:
            return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and 'results' in data:
            meta = {key: value for key, value in data.items() if key != 'results'}
            envelope = {'success': True, 'data': data['results'], 'meta': meta}
        else:
            envelope = {'success': True, 'data': data}

        return super().render(envelope, accepted_media_type, renderer_context)
