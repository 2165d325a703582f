"""Static showcase lists for the landing view."""

from __future__ import annotations

from pydantic import BaseModel


class TrendingDeveloper(BaseModel):
    login: str
    name: str
    description: str
    avatar: str
    category: str


TRENDING_DEVELOPERS: tuple[TrendingDeveloper, ...] = (
    TrendingDeveloper(
        login="torvalds",
        name="Linus Torvalds",
        description="Creator of Linux and Git",
        avatar="https://avatars.githubusercontent.com/u/1024025?v=4",
        category="System Programming",
    ),
    TrendingDeveloper(
        login="gaearon",
        name="Dan Abramov",
        description="React Core Team, Redux creator",
        avatar="https://avatars.githubusercontent.com/u/810438?v=4",
        category="Frontend",
    ),
    TrendingDeveloper(
        login="sindresorhus",
        name="Sindre Sorhus",
        description="Open source enthusiast",
        avatar="https://avatars.githubusercontent.com/u/170270?v=4",
        category="JavaScript",
    ),
    TrendingDeveloper(
        login="tj",
        name="TJ Holowaychuk",
        description="Express.js creator",
        avatar="https://avatars.githubusercontent.com/u/25254?v=4",
        category="Node.js",
    ),
    TrendingDeveloper(
        login="addyosmani",
        name="Addy Osmani",
        description="Google Chrome team",
        avatar="https://avatars.githubusercontent.com/u/110953?v=4",
        category="Performance",
    ),
    TrendingDeveloper(
        login="kentcdodds",
        name="Kent C. Dodds",
        description="Testing expert, educator",
        avatar="https://avatars.githubusercontent.com/u/1500684?v=4",
        category="Education",
    ),
    TrendingDeveloper(
        login="yukihiro-matz",
        name="Yukihiro Matsumoto",
        description="Ruby creator",
        avatar="https://avatars.githubusercontent.com/u/30733?v=4",
        category="Language Design",
    ),
    TrendingDeveloper(
        login="defunkt",
        name="Chris Wanstrath",
        description="GitHub co-founder",
        avatar="https://avatars.githubusercontent.com/u/2?v=4",
        category="Platform",
    ),
)

SAMPLE_SEARCHES: tuple[str, ...] = (
    "octocat",
    "github",
    "microsoft",
    "google",
    "facebook",
    "vercel",
    "netflix",
    "spotify",
)
