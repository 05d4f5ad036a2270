from flowmark.errors import (
    ConfigurationError,
    DirectionError,
    FlowchartError,
    FrontMatterError,
    SubgraphDirectionError,
    SubgraphIdentifierError,
    UnclosedSubgraphError,
    UnexpectedEndError,
    UnsupportedLineError,
)


class TestFlowchartError:
    def test_basic(self):
        err = FlowchartError("something broke")
        assert str(err) == "something broke"
        assert err.line_number is None

    def test_with_line_number(self):
        err = UnsupportedLineError("bad line", line_number=7)
        assert err.line_number == 7

    def test_is_value_error(self):
        assert isinstance(FlowchartError("x"), ValueError)


class TestHierarchy:
    def test_parse_errors_share_the_base(self):
        for error_cls in (
            FrontMatterError,
            DirectionError,
            SubgraphDirectionError,
            UnclosedSubgraphError,
            UnexpectedEndError,
            UnsupportedLineError,
        ):
            assert issubclass(error_cls, FlowchartError)

    def test_subgraph_direction_is_a_direction_error(self):
        assert issubclass(SubgraphDirectionError, DirectionError)
        assert not issubclass(SubgraphDirectionError, UnsupportedLineError)

    def test_construction_errors_share_the_base(self):
        assert issubclass(SubgraphIdentifierError, FlowchartError)
        assert issubclass(ConfigurationError, FlowchartError)
