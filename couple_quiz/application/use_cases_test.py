from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from couple_quiz.application.create_question.models import CreateQuestionRequest
from couple_quiz.application.create_question.use_case import CreateQuestionUseCase
from couple_quiz.application.get_partner.use_case import GetPartnerUseCase
from couple_quiz.application.get_score.use_case import GetScoreUseCase
from couple_quiz.application.get_user.use_case import GetUserByIdUseCase, GetUserByUsernameUseCase
from couple_quiz.application.list_unanswered.use_case import ListUnansweredUseCase
from couple_quiz.application.list_users.use_case import ListUsersUseCase
from couple_quiz.application.seed_users.use_case import SeedUsersUseCase
from couple_quiz.application.submit_answer.models import SubmitAnswerRequest
from couple_quiz.application.submit_answer.use_case import SubmitAnswerUseCase
from couple_quiz.domain.errors import (
    ConflictError,
    DataCorruptionError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from couple_quiz.domain.models.question import Answered, AnswerOption, Question
from couple_quiz.domain.models.user import User

SHIVAM = User(username="Shivam")
SHREYA = User(username="Shreya")


def _by_id(*users: User):
    index = {u.id: u for u in users}

    async def lookup(user_id):
        return index.get(user_id)

    return lookup


def _make_question(**overrides) -> Question:
    defaults = dict(
        question_text="Where was our first date?",
        options=(
            AnswerOption(text="Cafe", is_correct=True),
            AnswerOption(text="Park", is_correct=False),
        ),
        created_by=SHIVAM.id,
        intended_for=SHREYA.id,
        created_at=datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return Question(**defaults)


def _create_request(**overrides) -> CreateQuestionRequest:
    defaults = dict(
        question_text="Where was our first date?",
        options=[
            {"text": "Cafe", "isCorrect": True},
            {"text": "Park", "isCorrect": False},
        ],
        created_by_user_id=str(SHIVAM.id),
        intended_for_user_id=str(SHREYA.id),
    )
    defaults.update(overrides)
    return CreateQuestionRequest(**defaults)


class TestSeedUsers:
    @pytest.mark.asyncio
    async def test_creates_missing_users(self, mock_users):
        mock_users.get_by_username.return_value = None
        mock_users.list_all.return_value = [SHIVAM, SHREYA]

        await SeedUsersUseCase(mock_users).execute()

        saved = [call.args[0].username for call in mock_users.save.call_args_list]
        assert saved == ["Shivam", "Shreya"]

    @pytest.mark.asyncio
    async def test_existing_users_are_not_recreated(self, mock_users):
        mock_users.get_by_username.side_effect = lambda name: SHIVAM if name == "Shivam" else SHREYA
        mock_users.list_all.return_value = [SHIVAM, SHREYA]

        users = await SeedUsersUseCase(mock_users).execute()

        mock_users.save.assert_not_called()
        assert users == [SHIVAM, SHREYA]

    @pytest.mark.asyncio
    async def test_unexpected_user_count_is_data_corruption(self, mock_users):
        mock_users.get_by_username.return_value = SHIVAM
        mock_users.list_all.return_value = [SHIVAM, SHREYA, User(username="Shivam")]

        with pytest.raises(DataCorruptionError):
            await SeedUsersUseCase(mock_users).execute()


class TestUserLookups:
    @pytest.mark.asyncio
    async def test_list_users_returns_id_and_username(self, mock_users):
        mock_users.list_all.return_value = [SHIVAM, SHREYA]

        result = await ListUsersUseCase(mock_users).execute()

        assert [item.model_dump() for item in result] == [
            {"id": SHIVAM.id, "username": "Shivam"},
            {"id": SHREYA.id, "username": "Shreya"},
        ]

    @pytest.mark.asyncio
    async def test_unknown_username_is_not_found_without_lookup(self, mock_users):
        with pytest.raises(NotFoundError):
            await GetUserByUsernameUseCase(mock_users).execute("Alice")

        mock_users.get_by_username.assert_not_called()

    @pytest.mark.asyncio
    async def test_known_username_without_record_is_not_found(self, mock_users):
        mock_users.get_by_username.return_value = None

        with pytest.raises(NotFoundError):
            await GetUserByUsernameUseCase(mock_users).execute("Shreya")

    @pytest.mark.asyncio
    async def test_get_by_id_rejects_malformed_id(self, mock_users):
        with pytest.raises(InvalidArgumentError, match="Invalid user ID format"):
            await GetUserByIdUseCase(mock_users).execute("nope")

    @pytest.mark.asyncio
    async def test_get_by_id_missing_is_not_found(self, mock_users):
        mock_users.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await GetUserByIdUseCase(mock_users).execute(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_partner_is_the_other_user(self, mock_users):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM, SHREYA)
        mock_users.list_all.return_value = [SHIVAM, SHREYA]

        partner = await GetPartnerUseCase(mock_users).execute(str(SHIVAM.id))

        assert partner.id == SHREYA.id

    @pytest.mark.asyncio
    async def test_partner_missing_when_directory_incomplete(self, mock_users):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM)
        mock_users.list_all.return_value = [SHIVAM]

        with pytest.raises(NotFoundError, match="Partner"):
            await GetPartnerUseCase(mock_users).execute(str(SHIVAM.id))


class TestCreateQuestion:
    @pytest.mark.asyncio
    async def test_creates_and_resolves_usernames(self, mock_users, mock_questions):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM, SHREYA)
        mock_questions.save.side_effect = lambda q: q

        result = await CreateQuestionUseCase(mock_users, mock_questions).execute(_create_request())

        mock_questions.save.assert_called_once()
        saved: Question = mock_questions.save.call_args.args[0]
        assert saved.created_by == SHIVAM.id
        assert saved.intended_for == SHREYA.id
        assert result.created_by.username == "Shivam"
        assert result.intended_for.username == "Shreya"
        assert result.answered_correctly is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field", ["question_text", "options", "created_by_user_id", "intended_for_user_id"]
    )
    async def test_missing_field_rejected(self, mock_users, mock_questions, field):
        with pytest.raises(InvalidArgumentError, match="Missing required fields"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(**{field: None})
            )

    @pytest.mark.asyncio
    async def test_malformed_id_rejected(self, mock_users, mock_questions):
        with pytest.raises(InvalidArgumentError, match="format"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(intended_for_user_id="xyz")
            )

    @pytest.mark.asyncio
    async def test_self_targeting_rejected(self, mock_users, mock_questions):
        with pytest.raises(InvalidArgumentError, match="same user"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(intended_for_user_id=str(SHIVAM.id))
            )

    @pytest.mark.asyncio
    async def test_self_targeting_checked_before_options(self, mock_users, mock_questions):
        with pytest.raises(InvalidArgumentError, match="same user"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(intended_for_user_id=str(SHIVAM.id), options=[])
            )

    @pytest.mark.asyncio
    async def test_option_errors_checked_before_existence(self, mock_users, mock_questions):
        mock_users.get_by_id.return_value = None

        with pytest.raises(InvalidArgumentError, match="Exactly one"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(
                    options=[{"text": "A", "isCorrect": True}, {"text": "B", "isCorrect": True}]
                )
            )
        mock_users.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_short_question_text_rejected(self, mock_users, mock_questions):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM, SHREYA)

        with pytest.raises(InvalidArgumentError, match="at least 5"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(question_text="Hey")
            )
        mock_questions.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_users_reported_before_short_text(self, mock_users, mock_questions):
        mock_users.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Creator or intended recipient"):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(
                _create_request(question_text="Hey")
            )

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, mock_users, mock_questions):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM)

        with pytest.raises(NotFoundError):
            await CreateQuestionUseCase(mock_users, mock_questions).execute(_create_request())
        mock_questions.save.assert_not_called()


class TestListUnanswered:
    @pytest.mark.asyncio
    async def test_rejects_malformed_id(self, mock_users, mock_questions):
        with pytest.raises(InvalidArgumentError):
            await ListUnansweredUseCase(mock_users, mock_questions).execute("bad")

    @pytest.mark.asyncio
    async def test_empty_is_valid(self, mock_users, mock_questions):
        mock_questions.find_unanswered_for.return_value = []

        result = await ListUnansweredUseCase(mock_users, mock_questions).execute(str(SHREYA.id))

        assert result == []

    @pytest.mark.asyncio
    async def test_attaches_creator_username(self, mock_users, mock_questions):
        mock_questions.find_unanswered_for.return_value = [_make_question()]
        mock_users.list_all.return_value = [SHIVAM, SHREYA]

        result = await ListUnansweredUseCase(mock_users, mock_questions).execute(str(SHREYA.id))

        assert len(result) == 1
        assert result[0].created_by.username == "Shivam"
        mock_questions.find_unanswered_for.assert_called_once_with(SHREYA.id)

    @pytest.mark.asyncio
    async def test_dangling_creator_is_internal(self, mock_users, mock_questions):
        mock_questions.find_unanswered_for.return_value = [_make_question()]
        mock_users.list_all.return_value = [SHREYA]

        with pytest.raises(DataCorruptionError, match="unknown user"):
            await ListUnansweredUseCase(mock_users, mock_questions).execute(str(SHREYA.id))


class TestSubmitAnswer:
    @staticmethod
    def _request(user: User = SHREYA, text: str = "Cafe") -> SubmitAnswerRequest:
        return SubmitAnswerRequest(user_id=str(user.id), submitted_answer_text=text)

    @pytest.mark.asyncio
    async def test_correct_answer(self, mock_questions):
        question = _make_question()
        mock_questions.get_by_id.return_value = question
        mock_questions.record_answer.return_value = True

        result = await SubmitAnswerUseCase(mock_questions).execute(str(question.id), self._request())

        assert result.is_correct is True
        assert result.correct_answer_text == "Cafe"
        mock_questions.record_answer.assert_called_once_with(
            question.id, Answered(is_correct=True, submitted_text="Cafe")
        )

    @pytest.mark.asyncio
    async def test_incorrect_answer_still_reveals_correct_text(self, mock_questions):
        question = _make_question()
        mock_questions.get_by_id.return_value = question
        mock_questions.record_answer.return_value = True

        result = await SubmitAnswerUseCase(mock_questions).execute(
            str(question.id), self._request(text="Park")
        )

        assert result.is_correct is False
        assert result.correct_answer_text == "Cafe"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "question_id,user_id,text,match",
        [
            ("bad", str(uuid.uuid4()), "Cafe", "question ID"),
            (str(uuid.uuid4()), "bad", "Cafe", "user ID"),
            (str(uuid.uuid4()), str(uuid.uuid4()), "   ", "cannot be empty"),
        ],
    )
    async def test_invalid_input(self, mock_questions, question_id, user_id, text, match):
        request = SubmitAnswerRequest(user_id=user_id, submitted_answer_text=text)

        with pytest.raises(InvalidArgumentError, match=match):
            await SubmitAnswerUseCase(mock_questions).execute(question_id, request)
        mock_questions.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_question(self, mock_questions):
        mock_questions.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await SubmitAnswerUseCase(mock_questions).execute(str(uuid.uuid4()), self._request())

    @pytest.mark.asyncio
    async def test_only_recipient_may_answer(self, mock_questions):
        question = _make_question()
        mock_questions.get_by_id.return_value = question

        with pytest.raises(ForbiddenError):
            await SubmitAnswerUseCase(mock_questions).execute(
                str(question.id), self._request(user=SHIVAM)
            )
        mock_questions.record_answer.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_answered_is_conflict(self, mock_questions):
        question = _make_question(answer=Answered(is_correct=False, submitted_text="Park"))
        mock_questions.get_by_id.return_value = question

        with pytest.raises(ConflictError):
            await SubmitAnswerUseCase(mock_questions).execute(str(question.id), self._request())
        mock_questions.record_answer.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_race_is_conflict(self, mock_questions):
        question = _make_question()
        mock_questions.get_by_id.return_value = question
        mock_questions.record_answer.return_value = False

        with pytest.raises(ConflictError):
            await SubmitAnswerUseCase(mock_questions).execute(str(question.id), self._request())

    @pytest.mark.asyncio
    async def test_no_correct_option_is_data_corruption(self, mock_questions):
        question = _make_question(
            options=(
                AnswerOption(text="Cafe", is_correct=False),
                AnswerOption(text="Park", is_correct=False),
            )
        )
        mock_questions.get_by_id.return_value = question

        with pytest.raises(DataCorruptionError):
            await SubmitAnswerUseCase(mock_questions).execute(str(question.id), self._request())
        mock_questions.record_answer.assert_not_called()


class TestGetScore:
    @pytest.mark.asyncio
    async def test_counts_partner_questions_to_user(self, mock_users, mock_questions):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM, SHREYA)
        mock_users.list_all.return_value = [SHIVAM, SHREYA]
        mock_questions.count_answered.return_value = (3, 2)

        result = await GetScoreUseCase(mock_users, mock_questions).execute(str(SHREYA.id))

        mock_questions.count_answered.assert_called_once_with(
            created_by=SHIVAM.id, intended_for=SHREYA.id
        )
        assert result.score_percentage == 67
        assert result.total_answered == 3
        assert result.total_correct == 2
        assert result.about_whom == "Shivam"

    @pytest.mark.asyncio
    async def test_zero_answered(self, mock_users, mock_questions):
        mock_users.get_by_id.side_effect = _by_id(SHIVAM, SHREYA)
        mock_users.list_all.return_value = [SHIVAM, SHREYA]
        mock_questions.count_answered.return_value = (0, 0)

        result = await GetScoreUseCase(mock_users, mock_questions).execute(str(SHIVAM.id))

        assert (result.score_percentage, result.total_answered, result.total_correct) == (0, 0, 0)
        assert result.about_whom == "Shreya"

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_users, mock_questions):
        mock_users.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Current user"):
            await GetScoreUseCase(mock_users, mock_questions).execute(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_malformed_id(self, mock_users, mock_questions):
        with pytest.raises(InvalidArgumentError):
            await GetScoreUseCase(mock_users, mock_questions).execute("1234")
