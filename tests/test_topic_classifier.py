import pytest

from edura.services.topic_classifier import is_technical_topic


@pytest.mark.parametrize(
    "topic",
    [
        "Python",
        "Learn JavaScript and React",
        "Intro to Machine Learning",
        "Web Development bootcamp",
        "C++ for game engines",
        "SQL for analysts",
    ],
)
def test_programming_subjects_are_technical(topic):
    assert is_technical_topic(topic)


@pytest.mark.parametrize(
    "topic",
    [
        "Renaissance painting",
        "Digital art history",
        "Spanish for travellers",
        "Vitamin C and nutrition",
        "",
        None,
    ],
)
def test_other_subjects_are_not_technical(topic):
    assert not is_technical_topic(topic)


def test_technical_category_wins_over_topic_wording():
    assert is_technical_topic("Getting started", category="tech")
    assert is_technical_topic("Getting started", category=" Coding ")
    assert not is_technical_topic("Getting started", category="arts")


def test_extra_text_is_considered():
    assert is_technical_topic("Building a personal website", None, "Module 2: Styling with CSS")
