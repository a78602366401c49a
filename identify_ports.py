#!/usr/bin/env python3
"""Identify which serial port the XY table driver is on"""

from hardware.serial_transport import list_serial_ports


def main():
    print("="*70)
    print("SERIAL PORT IDENTIFIER")
    print("="*70)

    ports = list_serial_ports()
    if not ports:
        print("\nNo serial ports found.")
    for device, description in ports:
        print(f"\n{device}:")
        print(f"  {description}")

    print("\n" + "="*70)
    print("TO IDENTIFY THE XY TABLE PORT:")
    print("  1. Unplug the RS232 USB adapter of the RCX driver")
    print("  2. Run this script again")
    print("  3. See which port disappeared")
    print("  4. Put it in config/settings.json as hardware_config.xy_table.serial_port")
    print("="*70)


if __name__ == "__main__":
    main()
