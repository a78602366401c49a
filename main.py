#!/usr/bin/env python3

from core.logger import get_logger, shutdown_logger
from hardware.hardware_factory import create_table_controller
from hardware.serial_transport import list_serial_ports

logger = get_logger()


def main():
    print("XY Table Console")
    print("=" * 50)

    table = create_table_controller()
    actions = {
        "1": ("Open connection", lambda: report(table.open_connection(), table)),
        "2": ("Servo on", lambda: report(table.servo_on(), table)),
        "3": ("Servo off", lambda: report(table.servo_off(), table)),
        "4": ("Move", lambda: move(table)),
        "5": ("Get position", lambda: show_position(table)),
        "6": ("Manual mode", lambda: report(table.manual(), table)),
        "7": ("Emergency reset", lambda: report(table.reset(), table)),
        "8": ("Load program", lambda: load_program(table)),
        "9": ("Run program", lambda: report(table.run_program(), table)),
        "10": ("Send raw command", lambda: send_raw(table)),
        "11": ("List serial ports", list_ports),
        "12": ("Close connection", lambda: report(table.close_connection(), table)),
    }

    try:
        while True:
            print("\nOptions:")
            for key, (label, _) in actions.items():
                print(f"{key}. {label}")
            print("0. Exit")

            choice = input("\nEnter your choice: ").strip()

            if choice == "0":
                print("Goodbye!")
                break
            elif choice in actions:
                actions[choice][1]()
            else:
                print("Invalid choice. Please try again.")
    finally:
        table.close_connection()


def report(ok, table):
    if ok:
        print("OK")
    else:
        print(f"Failed: {table.last_error}")
    return ok


def move(table):
    try:
        x = float(input("X (mm, 0-650): "))
        y = float(input("Y (mm, 0-300): "))
        speed_text = input(f"Speed (Enter for {table.default_speed}): ").strip()
        speed = int(speed_text) if speed_text else None
    except ValueError as e:
        print(f"Error: Invalid input - {e}")
        return False

    logger.info(f"Console move to X={x}, Y={y}", category="cli")
    return report(table.move(x, y, speed), table)


def show_position(table):
    position = table.get_position()
    if position.is_valid:
        print(f"X={position.x:.1f}mm  Y={position.y:.1f}mm")
    else:
        print(f"Position unavailable: {table.last_error}")
    return position


def load_program(table):
    path = input("Program folder (Enter for current folder): ").strip()
    ok = report(table.load_program(path), table)
    if ok:
        print(f"Program name: {table.last_program}")
    return ok


def send_raw(table):
    name = input("Command (without @): ").strip()
    if not name:
        print("Nothing to send.")
        return False
    return report(table.send_command(name), table)


def list_ports():
    ports = list_serial_ports()
    if not ports:
        print("No serial ports found.")
    for device, description in ports:
        print(f"  {device}: {description}")
    return ports


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nProgram interrupted by user. Goodbye!")
    finally:
        shutdown_logger()
