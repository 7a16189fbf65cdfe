"""Time bucketing and text statistics for reviews."""

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Iterable

from catalog_discovery.core.entities import (
    ActivityBucket,
    ActivityInterval,
    KeywordFrequency,
    Review,
    SentimentSummary,
    as_utc,
)
from catalog_discovery.core.interfaces import TextNormalizer


def period_key(moment: datetime, interval: ActivityInterval) -> str:
    """Label of the period containing `moment`."""
    moment = as_utc(moment)
    if interval is ActivityInterval.DAY:
        return moment.strftime("%Y-%m-%d")
    if interval is ActivityInterval.WEEK:
        year, week, _ = moment.isocalendar()
        return f"{year}-W{week:02d}"
    if interval is ActivityInterval.MONTH:
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y")


def _step_back(moment: datetime, interval: ActivityInterval) -> datetime:
    if interval is ActivityInterval.DAY:
        return moment - timedelta(days=1)
    if interval is ActivityInterval.WEEK:
        return moment - timedelta(weeks=1)
    if interval is ActivityInterval.MONTH:
        first = moment.replace(day=1)
        return first - timedelta(days=1)
    return moment.replace(year=moment.year - 1, month=1, day=1)


def period_keys(now: datetime, interval: ActivityInterval, periods: int) -> list[str]:
    """Labels of the last `periods` periods ending at `now`, oldest first."""
    keys = []
    moment = as_utc(now)
    for _ in range(periods):
        keys.append(period_key(moment, interval))
        moment = _step_back(moment, interval)
    keys.reverse()
    return keys


def build_timeline(
    reviews: Iterable[Review],
    interval: ActivityInterval,
    periods: int,
    now: datetime,
) -> list[ActivityBucket]:
    """Review count and average rating per period; older reviews are ignored."""
    ratings: dict[str, list[int]] = defaultdict(list)
    for review in reviews:
        ratings[period_key(review.created_at, interval)].append(review.rating)

    timeline = []
    for key in period_keys(now, interval, periods):
        bucket = ActivityBucket(period=key)
        values = ratings.get(key)
        if values:
            bucket.review_count = len(values)
            bucket.average_rating = round(sum(values) / len(values), 2)
        timeline.append(bucket)
    return timeline


def summarize_sentiment(reviews: Iterable[Review]) -> SentimentSummary:
    """Split reviews into positive (4-5), neutral (3) and negative (1-2)."""
    ratings = [review.rating for review in reviews]
    if not ratings:
        return SentimentSummary(0, 0, 0, 0, 0.0, 0.0)

    positive = sum(1 for r in ratings if r >= 4)
    neutral = sum(1 for r in ratings if r == 3)
    negative = sum(1 for r in ratings if r <= 2)
    total = len(ratings)

    return SentimentSummary(
        positive=positive,
        neutral=neutral,
        negative=negative,
        total=total,
        sentiment_score=round((positive - negative) / total, 2),
        average_rating=round(sum(ratings) / total, 2),
    )


def count_keywords(
    texts: Iterable[str],
    normalizer: TextNormalizer,
    limit: int,
    min_length: int = 3,
) -> list[KeywordFrequency]:
    """Most frequent words across texts, ties broken alphabetically."""
    counter: Counter = Counter()
    for text in texts:
        counter.update(
            word for word in normalizer.normalize(text).split() if len(word) >= min_length
        )

    ranked = sorted(counter.items(), key=lambda pair: (-pair[1], pair[0]))
    return [KeywordFrequency(keyword=word, count=count) for word, count in ranked[:limit]]
