import random

import pytest

from smartnotes.providers.questions import DEFAULT_QUESTION_TEMPLATE, QuestionTemplate
from smartnotes.providers.variants import HUGGINGFACE, MEANINGCLOUD, OPENAI


def _possible(template, text, chosen):
    return {chosen.format(keyword=w) for w in template.candidate_words(text)}


@pytest.mark.unit
@pytest.mark.parametrize('text,expected', [
    ('Plants grow because sunlight feeds them', 'Why is {keyword} important in this context?'),
    ('Rivers flood since snowmelt arrives', 'Why is {keyword} important in this context?'),
    ('Explain how enzymes lower activation energy', 'How does {keyword} function in this scenario?'),
    ('Consider what mitosis achieves overall', 'What is the significance of {keyword}?'),
    ('Frost forms when temperatures plunge', 'When does {keyword} occur or apply?'),
    ('Deserts exist where rainfall is scarce', 'Where is {keyword} relevant?'),
    ('Glaciers carve valleys slowly', 'What is the main point about {keyword} in this passage?'),
])
def test_cue_selection(text, expected):
    assert DEFAULT_QUESTION_TEMPLATE.select(text) == expected
    q = DEFAULT_QUESTION_TEMPLATE.render(text, random.Random(7))
    assert q in _possible(DEFAULT_QUESTION_TEMPLATE, text, expected)


@pytest.mark.unit
def test_cue_priority_and_case_insensitivity():
    # "because" outranks "how"
    assert DEFAULT_QUESTION_TEMPLATE.select('HOW it works BECAUSE of physics') == 'Why is {keyword} important in this context?'
    assert DEFAULT_QUESTION_TEMPLATE.select('HOW it works') == 'How does {keyword} function in this scenario?'


@pytest.mark.unit
def test_single_candidate_keyword():
    q = DEFAULT_QUESTION_TEMPLATE.render('Energy is key', random.Random(1))
    assert q == 'What is the main point about Energy in this passage?'


@pytest.mark.unit
def test_stopwords_excluded_and_default_keyword():
    assert DEFAULT_QUESTION_TEMPLATE.candidate_words('these would could should about their those there') == []
    assert DEFAULT_QUESTION_TEMPLATE.render('These would be fine', random.Random(3)) == 'What is the main point about concept in this passage?'
    assert DEFAULT_QUESTION_TEMPLATE.render('', random.Random(3)) == 'What is the main point about concept in this passage?'


@pytest.mark.unit
def test_words_must_exceed_four_characters():
    assert DEFAULT_QUESTION_TEMPLATE.candidate_words('cell atom ribosome dna') == ['ribosome']


@pytest.mark.unit
def test_keyword_choice_is_seeded():
    text = 'Photosynthesis chlorophyll glucose stroma thylakoid'
    a = DEFAULT_QUESTION_TEMPLATE.render(text, random.Random(42))
    b = DEFAULT_QUESTION_TEMPLATE.render(text, random.Random(42))
    assert a == b


@pytest.mark.unit
def test_huggingface_template_is_case_sensitive():
    tpl = HUGGINGFACE.question_template
    assert tpl.select('Because rain falls') == 'What is the significance of {keyword} in this passage?'
    assert tpl.select('rain falls because clouds cool') == 'Why is {keyword} important in this context?'
    # no what/when/where cues for this backend
    assert tpl.select('what happens when') == 'What is the significance of {keyword} in this passage?'


@pytest.mark.unit
def test_meaningcloud_template_uses_first_sentence_for_keyword():
    tpl = MEANINGCLOUD.question_template
    text = 'Short one. Photosynthesis happens later when light arrives.'
    assert tpl.candidate_words(text) == ['Short']
    # cue scan still covers the whole passage
    assert tpl.render(text, random.Random(0)) == 'When does Short occur or apply?'


@pytest.mark.unit
def test_openai_template_quotes_keyword():
    q = OPENAI.question_template.render('Mitochondria', random.Random(0))
    assert q == 'What is the significance of "Mitochondria" in this context?'


@pytest.mark.unit
def test_template_is_immutable():
    tpl = QuestionTemplate(default='{keyword}?')
    with pytest.raises(Exception):
        tpl.default = 'changed'
