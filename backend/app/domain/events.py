# Realtime event names, shared with the dashboard and driver clients.

# client -> server
LOCATION_UPDATE = "location_update"

# server -> every connected client
RECEIVE_EMERGENCY = "receive_emergency"
RECEIVE_LOCATION = "receive_location"
STOP_ALARM = "stop_alarm"
RECEIVE_ACKNOWLEDGEMENT = "receive_acknowledgement"

BROADCAST_EVENTS = (RECEIVE_EMERGENCY, RECEIVE_LOCATION, STOP_ALARM, RECEIVE_ACKNOWLEDGEMENT)
