"""GestureTicTacToe - tic-tac-toe where every move is a drawn O or X."""

__version__ = "0.1.0"

from gesture_tictactoe.geometry import Point, BoundingBox
from gesture_tictactoe.layout import BoardLayout
from gesture_tictactoe.game import GameState, GameStatus, Player, PlacementResult, WIN_LINES
from gesture_tictactoe.classifier import ShapeClassifier, ShapeThresholds, Classification, RejectReason
from gesture_tictactoe.capture import GestureCapture, GesturePath, CaptureHandle, CaptureRejection
from gesture_tictactoe.orientation import OrientationController, OrientationEvent
from gesture_tictactoe.listeners import GameListener, ListenerManager
from gesture_tictactoe.canvas import BoardRenderer, DrawCommand
from gesture_tictactoe.config import GameConfig, ConfigError
from gesture_tictactoe.engine import GameEngine, TurnOutcome
from gesture_tictactoe.recorder import SessionRecorder, SessionPlayer
