from unittest.mock import MagicMock


def fake_response(status_code=200, payload=None, invalid_json=False):
    resp = MagicMock()
    resp.status_code = status_code
    if invalid_json:
        resp.json.side_effect = ValueError('not json')
    else:
        resp.json.return_value = payload
    return resp


class RecordingPost:
    """Stand-in for ``requests.post`` returning queued responses (or raising queued exceptions)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, timeout=None, **kwargs):
        self.calls.append({'url': url, 'timeout': timeout, **kwargs})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


HF_SUMMARY_OK = [{'summary_text': 'Plants turn light into sugar.'}]
HF_QUESTION_OK = [{'generated_text': 'What do plants turn light into?'}]
HF_LOADING = {'error': 'Model facebook/bart-large-cnn is currently loading'}

MC_SUMMARY_OK = {'status': {'code': '0', 'msg': 'OK'}, 'summary': 'Plants make sugar from light.'}
MC_RATE_LIMIT = {'status': {'code': '100', 'msg': 'Operation denied: rate limit exceeded'}}

OPENAI_CHAT_OK = {
    'id': 'chatcmpl-1',
    'object': 'chat.completion',
    'choices': [{'index': 0, 'message': {'role': 'assistant', 'content': ' Plants store light as glucose. '}, 'finish_reason': 'stop'}],
    'usage': {'prompt_tokens': 10, 'completion_tokens': 6, 'total_tokens': 16},
}
OPENAI_UNAUTHORIZED = {'error': {'message': 'Incorrect API key provided', 'type': 'invalid_request_error'}}
