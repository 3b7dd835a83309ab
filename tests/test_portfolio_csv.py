"""
Unit tests for the universal portfolio CSV format.

Tests cover:
- Section parsing with and without optional sections
- Weight maps
- Malformed input errors
- Serialization back to CSV
"""

import pytest

from portfolio_base import PortfolioImportError, RebalanceInput, RebalancerError, Strategy
from portfolio_io import parse_portfolio_csv, parse_weight_map, serialize_weight_map, to_portfolio_csv

FULL_PORTFOLIO = """
#holdings
account,symbol,shares
Fidelity 401k,VTI,100
Roth,"VXUS",50.5

#symbols
name,price,countries,assets,beta
VTI,250.00,us:1.0,equity:1.0,1.0
VXUS,60,intl:0.9|em:0.1,equity:1,

#accounts
name,tax_status,provider,owner
Fidelity 401k,tax_deferred,fidelity,sam
Roth,roth,,

#targets
symbol,percent
VTI,60
VXUS,40

#options
strategy,min_trades
rowDimension,symbol
colDimension,account
"""


class TestParsePortfolioCsv:
    """Tests for reading the multi-section CSV."""

    def test_all_sections(self):
        result = parse_portfolio_csv(FULL_PORTFOLIO)

        assert [(h.account, h.symbol, h.shares) for h in result.holdings] == [
            ("Fidelity 401k", "VTI", 100),
            ("Roth", "VXUS", 50.5),
        ]
        vti, vxus = result.symbols
        assert (vti.price, vti.countries, vti.beta) == (250, {"us": 1.0}, 1.0)
        assert vxus.countries == {"intl": 0.9, "em": 0.1}
        assert vxus.beta is None
        assert [(a.name, a.tax_status, a.provider, a.owner) for a in result.accounts] == [
            ("Fidelity 401k", "tax_deferred", "fidelity", "sam"),
            ("Roth", "roth", None, None),
        ]
        assert result.targets == {"VTI": 60, "VXUS": 40}
        assert result.strategy == Strategy.MIN_TRADES
        assert (result.row_dimension, result.col_dimension) == ("symbol", "account")

    def test_holdings_only(self):
        result = parse_portfolio_csv("#holdings\naccount,symbol,shares\nroth,VTI,10\n")

        assert len(result.holdings) == 1
        assert result.symbols is None
        assert result.accounts is None
        assert result.targets is None
        assert result.strategy is None

    def test_section_names_are_case_insensitive(self):
        result = parse_portfolio_csv("#Holdings\naccount,symbol,shares\nroth,VTI,10\n#TARGETS\nsymbol,percent\nVTI,100\n")

        assert result.targets == {"VTI": 100}

    def test_missing_holdings_section_raises(self):
        with pytest.raises(PortfolioImportError, match="Missing #holdings"):
            parse_portfolio_csv("#targets\nsymbol,percent\nVTI,100\n")

    def test_header_without_rows_raises(self):
        with pytest.raises(PortfolioImportError, match="Missing #holdings"):
            parse_portfolio_csv("#holdings\naccount,symbol,shares\n")

    def test_bad_share_count_names_the_row(self):
        with pytest.raises(PortfolioImportError, match="Invalid number 'ten'.*roth,VTI,ten"):
            parse_portfolio_csv("#holdings\naccount,symbol,shares\nroth,VTI,ten\n")

    def test_short_holdings_row_raises(self):
        with pytest.raises(PortfolioImportError, match="Expected account,symbol,shares"):
            parse_portfolio_csv("#holdings\naccount,symbol,shares\nroth,VTI\n")

    def test_unknown_strategy_option_raises(self):
        text = "#holdings\naccount,symbol,shares\nroth,VTI,10\n#options\nstrategy,fastest\n"

        with pytest.raises(PortfolioImportError, match="Unknown strategy 'fastest'"):
            parse_portfolio_csv(text)

    def test_import_error_is_a_rebalancer_error(self):
        with pytest.raises(RebalancerError):
            parse_portfolio_csv("")


class TestWeightMaps:
    """Tests for the key:weight|key:weight encoding."""

    def test_parse_skips_malformed_pairs(self):
        assert parse_weight_map("us:0.6|bogus|intl:x|em:0.4") == {"us": 0.6, "em": 0.4}

    def test_parse_empty(self):
        assert parse_weight_map("") == {}

    def test_serialize_drops_trailing_zero(self):
        assert serialize_weight_map({"us": 1.0, "intl": 0.25}) == "us:1|intl:0.25"


class TestToPortfolioCsv:
    """Tests for writing the multi-section CSV."""

    def test_holdings_only_output(self):
        data = RebalanceInput(holdings=[{"account": "roth", "symbol": "VTI", "shares": 10}])

        assert to_portfolio_csv(data) == "#holdings\naccount,symbol,shares\nroth,VTI,10\n"

    def test_full_round_trip(self):
        original = parse_portfolio_csv(FULL_PORTFOLIO)

        reparsed = parse_portfolio_csv(to_portfolio_csv(original))

        assert reparsed == original

    def test_sections_are_blank_line_separated(self):
        text = to_portfolio_csv(parse_portfolio_csv(FULL_PORTFOLIO))

        assert "\n\n#symbols\n" in text
        assert "\n\n#targets\nsymbol,percent\nVTI,60\nVXUS,40\n" in text
        assert text.endswith("colDimension,account\n")

    def test_names_with_commas_and_quotes_round_trip(self):
        """
        GIVEN an account name containing a comma and an owner containing quotes
        WHEN I serialize and re-parse the portfolio
        THEN both values come back unchanged
        """
        original = parse_portfolio_csv(
            '#holdings\naccount,symbol,shares\n"Smith, Joint",VTI,10\n\n'
            '#accounts\nname,tax_status,provider,owner\n"Smith, Joint",taxable,schwab,"Sam ""Jr"""\n'
        )

        text = to_portfolio_csv(original)
        reparsed = parse_portfolio_csv(text)

        assert '"Smith, Joint",VTI,10' in text
        assert reparsed == original
        assert reparsed.holdings[0].account == "Smith, Joint"
        assert reparsed.accounts[0].owner == 'Sam "Jr"'
