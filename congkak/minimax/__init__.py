from .search import AlphaBetaSearch, EvalWeights, evaluate_board

__all__ = ["AlphaBetaSearch", "EvalWeights", "evaluate_board"]
