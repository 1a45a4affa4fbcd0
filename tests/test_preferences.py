"""Tests for preference learning."""

from conftest import make_job

from job_feed.jobs.models import PreferenceProfile, Salary, SwipeEvent
from job_feed.matching.preferences import learn_preferences


def swipe(job, action: str) -> SwipeEvent:
    return SwipeEvent(user_id="user-1", job_id=job.id, action=action)


def lookup(*jobs):
    return {job.id: job for job in jobs}


class TestDefaults:
    def test_empty_log(self):
        prefs = learn_preferences([], {})
        assert prefs == PreferenceProfile(
            liked_companies=set(),
            disliked_companies=set(),
            preferred_industries=set(),
            salary_min=60000,
            location_preference=[],
            work_style="any",
        )

    def test_save_is_neutral(self):
        a = make_job(company="A")
        b = make_job(company="B", industry="Finance")
        prefs = learn_preferences([swipe(a, "save"), swipe(b, "save")], lookup(a, b))
        assert prefs == learn_preferences([], {})

    def test_unknown_job_ignored(self):
        a = make_job(company="A")
        prefs = learn_preferences([swipe(a, "like")], {})
        assert prefs == learn_preferences([], {})


class TestSignals:
    def test_like_and_apply_are_positive(self):
        a = make_job(company="A", industry="Finance")
        b = make_job(company="B", industry="Consulting")
        prefs = learn_preferences([swipe(a, "like"), swipe(b, "apply")], lookup(a, b))
        assert prefs.liked_companies == {"A", "B"}
        assert prefs.preferred_industries == {"Finance", "Consulting"}
        assert prefs.disliked_companies == set()

    def test_pass_is_negative(self):
        a = make_job(company="A", industry="Finance")
        prefs = learn_preferences([swipe(a, "pass")], lookup(a))
        assert prefs.disliked_companies == {"A"}
        assert prefs.liked_companies == set()
        assert prefs.preferred_industries == set()

    def test_company_can_be_liked_and_disliked(self):
        a1 = make_job(company="A", title="One")
        a2 = make_job(company="A", title="Two")
        prefs = learn_preferences([swipe(a1, "like"), swipe(a2, "pass")], lookup(a1, a2))
        assert "A" in prefs.liked_companies
        assert "A" in prefs.disliked_companies

    def test_unknown_industry_not_recorded(self):
        a = make_job(company="A", industry=None)
        prefs = learn_preferences([swipe(a, "like")], lookup(a))
        assert prefs.preferred_industries == set()


class TestSalary:
    def test_salary_min_from_mean(self):
        a = make_job(company="A", salary=Salary(base=100000))
        b = make_job(company="B", salary=Salary(base=120000))
        prefs = learn_preferences([swipe(a, "like"), swipe(b, "like")], lookup(a, b))
        assert prefs.salary_min == 88000

    def test_passed_salaries_ignored(self):
        a = make_job(company="A", salary=Salary(base=100000))
        b = make_job(company="B", salary=Salary(base=500000))
        prefs = learn_preferences([swipe(a, "like"), swipe(b, "pass")], lookup(a, b))
        assert prefs.salary_min == 80000

    def test_no_known_salary_keeps_default(self):
        a = make_job(company="A", salary=None)
        prefs = learn_preferences([swipe(a, "like")], lookup(a))
        assert prefs.salary_min == 60000


class TestLocationsAndWorkStyle:
    def test_top_three_locations_by_frequency(self):
        jobs = [
            make_job(company="A", location="Boston"),
            make_job(company="B", location="NYC"),
            make_job(company="C", location="NYC"),
            make_job(company="D", location="Austin"),
            make_job(company="E", location="Seattle"),
            make_job(company="F", location="Seattle"),
        ]
        prefs = learn_preferences([swipe(j, "like") for j in jobs], lookup(*jobs))
        assert prefs.location_preference == ["NYC", "Seattle", "Boston"]

    def test_location_ties_keep_first_seen_order(self):
        jobs = [make_job(company=c, location=loc) for c, loc in
                [("A", "Denver"), ("B", "Austin"), ("C", "Boston"), ("D", "Chicago")]]
        prefs = learn_preferences([swipe(j, "like") for j in jobs], lookup(*jobs))
        assert prefs.location_preference == ["Denver", "Austin", "Boston"]

    def test_most_common_work_style(self):
        jobs = [
            make_job(company="A", remote_type="onsite"),
            make_job(company="B", remote_type="remote"),
            make_job(company="C", remote_type="remote"),
        ]
        prefs = learn_preferences([swipe(j, "apply") for j in jobs], lookup(*jobs))
        assert prefs.work_style == "remote"

    def test_work_style_any_when_unobserved(self):
        a = make_job(company="A", remote_type=None)
        prefs = learn_preferences([swipe(a, "like")], lookup(a))
        assert prefs.work_style == "any"


class TestIdempotence:
    def test_same_log_same_profile(self):
        jobs = [make_job(company=c, location=c + " City") for c in "ABC"]
        events = [swipe(jobs[0], "like"), swipe(jobs[1], "pass"), swipe(jobs[2], "apply")]
        assert learn_preferences(events, lookup(*jobs)) == learn_preferences(events, lookup(*jobs))
