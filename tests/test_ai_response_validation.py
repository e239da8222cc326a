from ministering.services.ai_response_validation import parse_json_object


def test_parse_json_object_plain():
    assert parse_json_object('{"summary": "ok"}') == {"summary": "ok"}


def test_parse_json_object_handles_code_fence():
    payload = parse_json_object('```json\n{"patterns":["a"],"suggestions":["b"]}\n```')
    assert payload == {"patterns": ["a"], "suggestions": ["b"]}


def test_parse_json_object_recovers_from_surrounding_prose():
    payload = parse_json_object('Here you go:\n{"summary": "Visit"}\nHope this helps.')
    assert payload == {"summary": "Visit"}


def test_parse_json_object_rejects_arrays_and_garbage():
    assert parse_json_object('["a", "b"]') is None
    assert parse_json_object("not json at all") is None
    assert parse_json_object("") is None
    assert parse_json_object(None) is None
