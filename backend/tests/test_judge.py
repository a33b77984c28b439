import pytest

from conftest import RecordingRenderer
from scramble import messages
from scramble.services.game import SequenceJudge, Token, Verdict


def _setup(n):
    renderer = RecordingRenderer()
    tokens = []
    for i in range(1, n + 1):
        t = Token(id=i, label=str(i), revealed=False)
        t.handle = renderer.create_token(i, t.label, None)
        tokens.append(t)
    notes = []
    judge = SequenceJudge(tokens, notify=notes.append)
    return judge, tokens, renderer, notes


def test_canonical_order_defaults_to_identity():
    judge, _, _, _ = _setup(4)
    assert judge.canonical_order == (1, 2, 3, 4)
    assert judge.expected == 1


@pytest.mark.parametrize('n', [3, 5, 7])
def test_full_correct_sequence_succeeds_once(n):
    judge, tokens, renderer, notes = _setup(n)
    verdicts = [judge.submit(i) for i in range(1, n + 1)]

    assert verdicts[:-1] == [Verdict.COLLECTING] * (n - 1)
    assert verdicts[-1] == Verdict.SUCCESS
    assert renderer.events('show') == [('show', i) for i in range(1, n + 1)]
    assert notes == [messages.SUCCESS]
    assert judge.progress == list(range(1, n + 1))
    assert all(t.revealed for t in tokens)


@pytest.mark.parametrize('k', [0, 1, 2, 3])
def test_wrong_token_at_any_position_reveals_everything(k):
    n = 5
    judge, tokens, renderer, notes = _setup(n)
    for i in range(1, k + 1):
        judge.submit(i)
    before = len(renderer.events('show'))

    wrong = n if k + 1 != n else 1
    assert judge.submit(wrong) == Verdict.FAILED

    full_reveal = renderer.events('show')[before:]
    assert full_reveal == [('show', i) for i in range(1, n + 1)]
    assert notes == [messages.WRONG_ORDER]
    assert judge.progress == list(range(1, k + 1))
    assert all(t.revealed for t in tokens)


def test_unknown_token_counts_as_wrong():
    judge, _, _, notes = _setup(3)
    assert judge.submit(99) == Verdict.FAILED
    assert notes == [messages.WRONG_ORDER]


@pytest.mark.parametrize('finish', ['success', 'failed'])
def test_submissions_after_terminal_state_do_nothing(finish):
    judge, _, renderer, notes = _setup(3)
    if finish == 'success':
        for i in (1, 2, 3):
            judge.submit(i)
    else:
        judge.submit(2)
    log_before = list(renderer.log)
    notes_before = list(notes)
    progress_before = list(judge.progress)
    verdict = judge.verdict

    for token_id in (1, 2, 3, 42):
        assert judge.submit(token_id) == verdict

    assert renderer.log == log_before
    assert notes == notes_before
    assert judge.progress == progress_before
    assert judge.expected is None


def test_three_token_examples():
    judge, _, renderer, notes = _setup(3)
    for i in (1, 2, 3):
        judge.submit(i)
    assert judge.verdict == Verdict.SUCCESS
    assert [e[1] for e in renderer.events('show')] == [1, 2, 3]

    judge, _, renderer, notes = _setup(3)
    assert judge.submit(1) == Verdict.COLLECTING
    assert judge.submit(3) == Verdict.FAILED
    assert [e[1] for e in renderer.events('show')] == [1, 1, 2, 3]
    assert notes == [messages.WRONG_ORDER]


def test_custom_canonical_order():
    tokens = [Token(id=i, label=str(i), revealed=False) for i in (1, 2, 3)]
    judge = SequenceJudge(tokens, canonical_order=[3, 1, 2])
    assert judge.submit(3) == Verdict.COLLECTING
    assert judge.submit(1) == Verdict.COLLECTING
    assert judge.submit(2) == Verdict.SUCCESS


def test_canonical_order_must_reference_known_tokens():
    tokens = [Token(id=1, label='1')]
    with pytest.raises(ValueError):
        SequenceJudge(tokens, canonical_order=[1, 2])


def test_to_dict():
    judge, _, _, _ = _setup(3)
    judge.submit(1)
    assert judge.to_dict() == {'verdict': 'collecting', 'progress': [1]}


def test_empty_canonical_order_is_rejected():
    with pytest.raises(ValueError):
        SequenceJudge([])
    with pytest.raises(ValueError):
        SequenceJudge([Token(id=1, label='1')], canonical_order=[])
