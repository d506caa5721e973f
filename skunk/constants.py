"""Constants and wire field names for the Skunk scoring core."""

# Match status values
STATUS_ACTIVE = 'active'

# In binary-scored games a score of exactly 1 marks the winner
BINARY_WIN_SCORE = 1

# Winning condition tokens (display string: "game:high|round:high")
CONDITION_SEPARATOR = '|'
GAME_CONDITION_PREFIX = 'game:'
ROUND_CONDITION_PREFIX = 'round:'
CONDITION_HIGH = 'high'
CONDITION_LOW = 'low'

# Score calculation modes derived from countAllScores / countLosersOnly
SCORE_CALC_ALL = 'all'
SCORE_CALC_LOSERS_SUM = 'losers_sum'
SCORE_CALC_WINNER_ONLY = 'winner_only'

# Separator for the derived playerIDsString lookup key
PLAYER_IDS_SEPARATOR = ','

# Match wire record fields
MATCH_ID = 'id'
MATCH_DATE = 'date'
MATCH_GAME_ID = 'gameID'
MATCH_PLAYER_IDS = 'playerIDs'
MATCH_PLAYER_IDS_STRING = 'playerIDsString'
MATCH_PLAYER_ORDER = 'playerOrder'
MATCH_SCORES = 'scores'
MATCH_ROUNDS = 'rounds'
MATCH_TEAMS = 'teams'
MATCH_WINNER_ID = 'winnerID'
MATCH_WINNER_TEAM_ID = 'winnerTeamId'
MATCH_IS_MULTIPLAYER = 'isMultiplayer'
MATCH_STATUS = 'status'
MATCH_INVITED_PLAYER_IDS = 'invitedPlayerIDs'
MATCH_ACCEPTED_PLAYER_IDS = 'acceptedPlayerIDs'
MATCH_CREATED_BY_ID = 'createdByID'
MATCH_LAST_MODIFIED = 'lastModified'
MATCH_SESSION_CODE = 'sessionCode'

# Team blob fields
TEAM_ID = 'teamId'
TEAM_PLAYER_IDS = 'playerIDs'
TEAM_SCORE = 'score'

# Game wire record fields
GAME_ID = 'id'
GAME_TITLE = 'title'
GAME_IS_BINARY_SCORE = 'isBinaryScore'
GAME_IS_TEAM_BASED = 'isTeamBased'
GAME_HIGHEST_SCORE_WINS = 'highestScoreWins'
GAME_HIGHEST_ROUND_SCORE_WINS = 'highestRoundScoreWins'
GAME_COUNT_ALL_SCORES = 'countAllScores'
GAME_COUNT_LOSERS_ONLY = 'countLosersOnly'
GAME_SUPPORTED_PLAYER_COUNTS = 'supportedPlayerCounts'
GAME_WINNING_CONDITIONS = 'winningConditions'
GAME_CREATED_BY_ID = 'createdByID'
