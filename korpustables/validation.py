"""Consistency checks over materialized tables."""

import logging

import pandas as pd

from .config import Config
from .data.tables import read_table
from .errors import TableConsistencyError
from .stages.dictionaries import DIMENSIONS

logger = logging.getLogger(__name__)

# Offending rows shown per problem
SAMPLE_SIZE = 5


def check_dictionaries(facts: pd.DataFrame, dimensions: dict[str, pd.DataFrame]) -> None:
    """
    Check the fact table against the four dimension dictionaries.

    Every ``*_id`` must exist in its dictionary, and each dictionary
    entry's incidence must equal the summed incidence of the fact rows
    referencing it.

    Raises:
        TableConsistencyError: Listing every violated check
    """
    problems = []

    for table, value_column in DIMENSIONS.items():
        dimension = dimensions[table]
        foreign_key = f"{value_column}_id"

        dangling = facts.loc[~facts[foreign_key].isin(dimension["id"]), foreign_key]
        if not dangling.empty:
            problems.append(
                f"{foreign_key} references missing {table} ids: "
                f"{dangling.head(SAMPLE_SIZE).tolist()}"
            )

        totals = facts.groupby(foreign_key)["incidence"].sum()
        expected = dimension.set_index("id")["incidence"]
        diff = expected.sub(totals, fill_value=0)
        mismatched = diff[diff != 0]
        if not mismatched.empty:
            problems.append(
                f"{table} incidence differs from fact table for ids "
                f"{mismatched.index[:SAMPLE_SIZE].tolist()}"
            )

    if problems:
        raise TableConsistencyError("; ".join(problems))


def check_positions(wpis: pd.DataFrame, wlpt_chars: pd.DataFrame) -> None:
    """
    Check the WPIS table against the WLPT character table.

    Every ``wlpt_id`` must exist; positions start at 1 in each sentence
    and grow by 1 without gaps; the row count equals the corpus token
    count (the summed WLPT incidence).

    Raises:
        TableConsistencyError: Listing every violated check
    """
    problems = []

    dangling = wpis.loc[~wpis["wlpt_id"].isin(wlpt_chars["id"]), "wlpt_id"]
    if not dangling.empty:
        problems.append(f"wlpt_id references missing ids: {dangling.head(SAMPLE_SIZE).tolist()}")

    previous_id = wpis["id"].shift()
    previous_position = wpis["position"].shift()
    new_run = wpis["id"] != previous_id
    valid = (wpis["position"] == 1) | (~new_run & (wpis["position"] == previous_position + 1))
    broken = wpis.index[~valid]
    if len(broken):
        problems.append(f"position sequence broken at rows {broken[:SAMPLE_SIZE].tolist()}")

    tokens = int(wlpt_chars["incidence"].sum())
    if len(wpis) != tokens:
        problems.append(f"{len(wpis)} position rows but {tokens} tokens in the WLPT table")

    if problems:
        raise TableConsistencyError("; ".join(problems))


def validate_outputs(config: Config) -> list[str]:
    """
    Run every check whose tables exist in the output directory.

    Args:
        config: Pipeline configuration (locates the tables)

    Returns:
        Names of the checks that ran

    Raises:
        TableConsistencyError: On the first failing check
    """
    ran = []

    if all(config.table_path(table).exists() for table in ("wlpt", *DIMENSIONS)):
        facts = read_table(config.table_path("wlpt"), "wlpt")
        dimensions = {table: read_table(config.table_path(table), table) for table in DIMENSIONS}
        check_dictionaries(facts, dimensions)
        ran.append("dictionaries")
        logger.info("Dictionary tables are consistent")

    if config.table_path("wpis").exists() and config.table_path("wlpt_chars").exists():
        wpis = read_table(config.table_path("wpis"), "wpis")
        wlpt_chars = read_table(config.table_path("wlpt_chars"), "wlpt_chars")
        check_positions(wpis, wlpt_chars)
        ran.append("positions")
        logger.info("Position table is consistent")

    if not ran:
        logger.warning(f"No tables to validate in {config.output.output_dir}")
    return ran
