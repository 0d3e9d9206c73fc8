# Inbound
USER_IDENTIFY = "user:identify"
ROOM_CREATE = "room:create"
ROOM_JOIN = "room:join"
ROOM_LIST = "room:list"
ROOM_LEAVE = "room:leave"
ROOM_START = "room:start"
ROUND_CHOOSE_LETTER = "round:choose_letter"
ROUND_SUBMIT_ANSWERS = "round:submit_answers"
ROUND_STOP = "round:stop"

# Outbound
USER_IDENTIFIED = "user:identified"
ROOM_JOINED = "room:joined"
ROOM_PLAYERS = "room:players"
ROOM_ERROR = "room:error"
ROUND_TICK = "round:tick"
ROUND_STARTED = "round:started"
ROUND_AWAITING_LETTER = "round:awaiting_letter"
ROUND_ANSWERS_RECEIVED = "round:answers_received"
ROUND_READINESS = "round:readiness"
ROUND_RESULT = "round:result"
GAME_FINISHED = "game:finished"
