"""Grouping of match data into glicko-2 rating periods"""

import logging
from typing import List, Optional
import numpy as np
import polars as pl
from skillrate.utils.date_utils import get_duration

logger = logging.getLogger(__name__)


class PeriodDataset:
    """
    Pairwise match results split into rating periods.

    Each row of the source frame is one match between the competitors named in
    competitor_cols, with outcome_col holding the score of the first competitor
    (1.0 win, 0.5 draw, 0.0 loss). Rows are expected in chronological order.
    """

    def __init__(
        self,
        df: pl.DataFrame,
        competitor_cols: List[str],
        outcome_col: str,
        datetime_col: Optional[str] = None,
        time_step_col: Optional[str] = None,
        rating_period: str = '1W',
    ):
        if len(competitor_cols) != 2:
            raise ValueError('competitor_cols must name exactly two columns')
        if sum([bool(datetime_col), bool(time_step_col)]) != 1:
            raise ValueError('Specify exactly one of datetime_col or time_step_col')

        self._init_competitors(df, competitor_cols)
        self._init_matchups(df, competitor_cols)
        self.outcomes = df[outcome_col].cast(pl.Float64).to_numpy()

        if time_step_col:
            self.time_steps = df[time_step_col].to_numpy()
        else:
            self.time_steps = self._convert_datetime(df[datetime_col], rating_period)
        self._process_time_steps()
        logger.info(f'{len(self)} matchups, {self.num_competitors} competitors, {self.num_periods} rating periods')

    def _init_competitors(self, df: pl.DataFrame, competitor_cols: List[str]):
        competitor_series = pl.concat([df[col].cast(pl.Utf8) for col in competitor_cols])
        self.competitors = sorted(competitor_series.unique().to_list())
        self.num_competitors = len(self.competitors)
        self.competitor_to_idx = dict(zip(self.competitors, range(self.num_competitors)))

    def _init_matchups(self, df: pl.DataFrame, competitor_cols: List[str]):
        if df.height == 0:
            self.matchups = np.empty((0, 2), dtype=np.int64)
            return
        columns = [
            df[col].cast(pl.Utf8).replace_strict(self.competitor_to_idx, return_dtype=pl.Int64).to_numpy()
            for col in competitor_cols
        ]
        self.matchups = np.ascontiguousarray(np.column_stack(columns))

    @staticmethod
    def _convert_datetime(datetime_series: pl.Series, rating_period: str) -> np.ndarray:
        if datetime_series.dtype == pl.Date:
            datetime_series = datetime_series.cast(pl.Datetime)
        elif datetime_series.dtype == pl.Utf8:
            datetime_series = datetime_series.str.to_datetime()

        period_seconds = get_duration(rating_period)
        seconds_since_epoch = (datetime_series.dt.timestamp('us') // 1_000_000).to_numpy()
        if len(seconds_since_epoch) == 0:
            return np.empty(0, dtype=np.int64)
        return ((seconds_since_epoch - seconds_since_epoch[0]) // period_seconds).astype(np.int64)

    def _process_time_steps(self):
        """find where each run of equal time steps ends"""
        if len(self.time_steps) == 0:
            self.unique_time_steps = np.empty(0, dtype=np.int64)
            self.time_step_end_idxs = np.empty(0, dtype=np.int64)
            return
        boundaries = np.flatnonzero(np.diff(self.time_steps)) + 1
        self.unique_time_steps = self.time_steps[np.concatenate(([0], boundaries))]
        self.time_step_end_idxs = np.append(boundaries, len(self.time_steps))

    @property
    def num_periods(self) -> int:
        return len(self.unique_time_steps)

    def __len__(self):
        return self.matchups.shape[0]

    def __iter__(self):
        """yield (matchups, outcomes, time_step) once per rating period"""
        start_idx = 0
        for time_step, end_idx in zip(self.unique_time_steps, self.time_step_end_idxs):
            yield self.matchups[start_idx:end_idx], self.outcomes[start_idx:end_idx], int(time_step)
            start_idx = end_idx

    @classmethod
    def init_from_arrays(cls, time_steps: np.ndarray, matchups: np.ndarray, outcomes: np.ndarray, competitors: list):
        """Factory method for building a dataset from already indexed arrays."""
        dataset = cls.__new__(cls)
        dataset.time_steps = np.asarray(time_steps)
        dataset.matchups = np.asarray(matchups)
        dataset.outcomes = np.asarray(outcomes, dtype=np.float64)
        dataset.competitors = list(competitors)
        dataset.num_competitors = len(dataset.competitors)
        dataset.competitor_to_idx = dict(zip(dataset.competitors, range(dataset.num_competitors)))
        dataset._process_time_steps()
        return dataset
