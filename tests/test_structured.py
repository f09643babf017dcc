from sheetassist.llm.structured import extract_structured_payload


def test_cell_updates_extracted():
    text = 'Sure.\nCell Updates: [{"row":0,"col":1,"value":"x"}]'
    cell_updates, actions = extract_structured_payload(text)
    assert cell_updates == [{"row": 0, "col": 1, "value": "x"}]
    assert actions is None


def test_labels_are_case_insensitive_and_span_lines():
    text = (
        "cell updates: [\n"
        '  {"row": 1, "col": 0, "value": 3},\n'
        '  {"row": 2, "col": 0, "value": "=A1+A2"}\n'
        "]\n"
        'ACTIONS: [{"description": "Apply formula"}]'
    )
    cell_updates, actions = extract_structured_payload(text)
    assert [u["row"] for u in cell_updates] == [1, 2]
    assert actions == [{"description": "Apply formula"}]


def test_actions_found_even_when_listed_first():
    text = 'Actions: [{"description": "a"}]\nCell Updates: [{"row":0,"col":0,"value":1}]'
    cell_updates, actions = extract_structured_payload(text)
    assert cell_updates == [{"row": 0, "col": 0, "value": 1}]
    assert actions == [{"description": "a"}]


def test_invalid_span_leaves_only_that_field_empty():
    text = "Cell Updates: [not json]\nActions: []"
    cell_updates, actions = extract_structured_payload(text)
    assert cell_updates is None
    assert actions == []


def test_no_labels():
    assert extract_structured_payload("Just prose, [1, 2] included.") == (None, None)
    assert extract_structured_payload("") == (None, None)
